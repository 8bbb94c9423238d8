import os
import tempfile

# Settings are cached on first import; point the app at a scratch database
_tmp_dir = tempfile.mkdtemp(prefix="fugazzi-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'test.db')}")
os.environ.setdefault("LOG_LEVEL", "WARNING")
