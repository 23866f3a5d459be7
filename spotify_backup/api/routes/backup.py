"""Backup download, restore upload and restore progress."""
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from spotify_backup.api.pages import render_index, render_restore_form
from spotify_backup.api.state import AppState, get_session, get_state
from spotify_backup.config import DOWNLOAD_FILENAME
from spotify_backup.core.errors import AuthError, RemoteError, TransferFormatError
from spotify_backup.core.restore import restore_document
from spotify_backup.core.session import Session
from spotify_backup.core.transfer_codec import dumps_document, loads_document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index(session: Session = Depends(get_session)):
    return render_index(session.logged_in, bool(session.document), session.report)


@router.get("/download")
def download(session: Session = Depends(get_session)):
    """Return the last backup of this session as a JSON attachment."""
    return Response(
        content=dumps_document(session.document),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={DOWNLOAD_FILENAME}"},
    )


@router.get("/restore")
def restore_form(session: Session = Depends(get_session)):
    if not session.logged_in:
        return RedirectResponse(url="/login", status_code=303)
    return HTMLResponse(render_restore_form())


@router.post("/restore")
def restore_upload(
    backup: Optional[UploadFile] = File(None),
    app_state: AppState = Depends(get_state),
    session: Session = Depends(get_session),
):
    """Re-create every playlist of the uploaded backup on the logged-in account."""
    if not session.logged_in:
        return RedirectResponse(url="/login", status_code=303)
    if backup is None:
        return PlainTextResponse("Error reading file", status_code=400)
    try:
        data = backup.file.read()
    except OSError as e:
        logger.error("Error reading upload: %s", e)
        return PlainTextResponse("Error reading file", status_code=400)
    finally:
        backup.file.close()

    try:
        document = loads_document(data)
    except TransferFormatError as e:
        logger.error("Error parsing backup: %s", e)
        return PlainTextResponse("Error parsing JSON", status_code=400)

    with session.lock:
        client = app_state.client_for(session)
        try:
            user = client.current_user()
            session.last_progress = None
            session.last_completion = None
            session.report = restore_document(
                client,
                document,
                user["id"],
                on_progress=session.record_progress,
                on_complete=session.record_completion,
            )
        except AuthError as e:
            logger.error("Token rejected during restore: %s", e)
            response = PlainTextResponse("Couldn't get token", status_code=403)
            app_state.end_session(session, response)
            return response
        except RemoteError as e:
            logger.error("Error getting user info: %s", e)
            return PlainTextResponse("Error getting user info", status_code=500)
    return RedirectResponse(url="/", status_code=303)


@router.get("/progress")
def progress(session: Session = Depends(get_session)):
    """Latest restore progress event and the last finished report, if any."""
    return {
        "progress": asdict(session.last_progress) if session.last_progress else None,
        "completed": asdict(session.last_completion) if session.last_completion else None,
        "report": asdict(session.report) if session.report else None,
    }
