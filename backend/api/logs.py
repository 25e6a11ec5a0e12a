import io
import json
import logging
import os
import zipfile
from typing import Optional

from fastapi import APIRouter, Query, Response

from services.logging_service import LOG_FILE, get_ring_handler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/recent")
def get_recent_logs(
    limit: int = Query(500, ge=1, le=5000),
    level: Optional[str] = Query(None, description="Minimum level, e.g. WARNING"),
):
    return {"logs": get_ring_handler().get_recent(limit, min_level=level)}


@router.get("/download")
def download_logs():
    """Zip of the rotated log files plus the in-memory ring buffer."""
    buf = io.BytesIO()
    prefix = os.path.splitext(os.path.basename(LOG_FILE))[0]
    directory = os.path.dirname(LOG_FILE)
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        if os.path.isdir(directory):
            for name in sorted(os.listdir(directory)):
                path = os.path.join(directory, name)
                if name.startswith(prefix) and os.path.isfile(path):
                    zf.write(path, arcname=name)
        else:
            logger.info(f"📁 Log directory not created yet: {directory}")

        recent = {"logs": get_ring_handler().get_recent(2000)}
        zf.writestr("recent_ring_buffer.json", json.dumps(recent, indent=2))

    headers = {"Content-Disposition": 'attachment; filename="catalog-logs.zip"'}
    return Response(content=buf.getvalue(), media_type="application/zip", headers=headers)
