from __future__ import annotations

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response

from comicshelf.services import catalog_store
from comicshelf.services.errors import CatalogImportError


router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", summary="List catalog records")
def list_records():
	return catalog_store.load_records()


@router.get("/export", summary="Download the catalog as JSON")
def export_records():
	return Response(
		content=catalog_store.export_records(),
		media_type="application/json",
		headers={"Content-Disposition": "attachment; filename=comics-export.json"},
	)


@router.post("/import", summary="Replace the catalog with an exported JSON file")
async def import_records(file: UploadFile = File(...)):
	text = (await file.read()).decode("utf-8", errors="replace")
	try:
		records = catalog_store.import_records(text)
	except CatalogImportError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return {"imported": len(records)}
