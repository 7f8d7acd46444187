import os
import tempfile

# Must be set before carwash.config is first imported
_db_dir = tempfile.mkdtemp(prefix="carwash-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'carwash.db')}"
os.environ.setdefault("KUDISMS_TOKEN", "")
os.environ.setdefault("SENDGRID_API_KEY", "")
