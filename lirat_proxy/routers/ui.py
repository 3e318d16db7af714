from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

"""Production-only serving of the prebuilt front-end bundle.

Any GET that no API route claimed resolves to a file under the static
directory, or to ``index.html`` so client-side routing works on deep links.
Only mounted by create_app when NODE_ENV=production.
"""

INDEX_FILE = "index.html"


def build_ui_router(static_dir: Path) -> APIRouter:
    root = static_dir.resolve()
    router = APIRouter(tags=["ui"])

    @router.get("/{full_path:path}", include_in_schema=False)
    async def spa(full_path: str):
        candidate = (root / full_path).resolve()
        if not candidate.is_relative_to(root):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        if full_path and candidate.is_file():
            return FileResponse(candidate)
        index = root / INDEX_FILE
        if not index.is_file():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        return FileResponse(index)

    return router
