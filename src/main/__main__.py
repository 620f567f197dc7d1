"""``python -m src.main`` starts the Celery worker."""

from .worker import main

if __name__ == "__main__":
    main()
