import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from comicshelf.config import get_settings
from comicshelf.routers.catalog import router as catalog_router
from comicshelf.routers.ingest_covers import router as ingest_router


def create_app() -> FastAPI:
	settings = get_settings()
	logging.basicConfig(
		level=settings.log_level,
		format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
	)

	app = FastAPI(title="ComicShelf - Cover Ingestion API", version="0.1.0")

	# CORS (set COMICSHELF_CORS_ORIGINS in production)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_origins,
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	# Routers
	app.include_router(ingest_router)
	app.include_router(catalog_router)

	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn comicshelf.main:app --reload
	import uvicorn

	uvicorn.run("comicshelf.main:app", host="0.0.0.0", port=8000, reload=True)
