# Entry point for uvicorn, run from apps/api:
#   uvicorn main:app --reload
from dreamlog.main import create_app

app = create_app()
