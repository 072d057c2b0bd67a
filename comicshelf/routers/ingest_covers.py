from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, UploadFile

from comicshelf.services.ingest_pipeline import run_ingest_job
from comicshelf.services.status_store import read_status, write_status


router = APIRouter(prefix="/ingest", tags=["ingest"])


def _slugify(text: str) -> str:
	return "".join(ch if (ch.isalnum() or ch in ("-", "_")) else "-" for ch in text).strip("-_").lower()


def _make_job_id(filenames: List[str]) -> str:
	# "<first_filename_stem>_<ddmmyyyy_hhmmss>"
	first_stem = _slugify(Path(filenames[0]).stem) if filenames else ""
	stamp = datetime.now().strftime("%d%m%Y_%H%M%S_%f")
	return f"{first_stem or 'batch'}_{stamp}"


@router.post("/upload", summary="Upload comic cover scans and ingest them in the background")
async def upload(
	background_tasks: BackgroundTasks,
	files: List[UploadFile] = File(...),
):
	files_meta = []
	for f in files:
		data = await f.read()
		files_meta.append({
			"filename": f.filename or "cover.jpg",
			"content_type": f.content_type or "",
			"size": len(data),
			"data": data,
		})
	filenames = [Path(m["filename"]).name for m in files_meta]
	job_id = _make_job_id(filenames)
	write_status(job_id, {"job_id": job_id, "status": "queued", "step": "Queued"})
	background_tasks.add_task(run_ingest_job, job_id, files_meta)
	return {
		"job_id": job_id,
		"status": "queued",
		"num_files": len(files_meta),
		"filenames": filenames,
		"status_endpoint": f"/ingest/status/{job_id}",
		"result_endpoint": f"/ingest/result/{job_id}",
	}


@router.get("/status/{job_id}", summary="Get ingestion status")
def status(job_id: str):
	return read_status(job_id)


@router.get("/result/{job_id}", summary="Get ingestion results")
def result(job_id: str):
	data = read_status(job_id)
	if data.get("status") == "unknown":
		raise HTTPException(status_code=404, detail=f"Unknown job: {job_id}")
	if data.get("status") not in ("completed", "error"):
		return {"job_id": job_id, "status": data.get("status"), "message": "not completed yet"}
	return {
		"job_id": job_id,
		"status": data.get("status"),
		"progress": data.get("progress", {"completed": 0, "total": 0}),
		"succeeded": data.get("succeeded", 0),
		"failures": data.get("failures", []),
		"error": data.get("error"),
	}
