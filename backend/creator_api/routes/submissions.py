"""Fan mail / fan art submission form."""

import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import SQLAlchemyError

from creator_api.dependencies import get_blob_store, get_record_store
from creator_api.errors import SubmissionError
from creator_api.services.blob_store import BlobStore
from creator_api.services.record_store import SqlRecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/v1/user/view-form/submit-fan-mail")
async def submit_fan_mail(
    name: str = Form(...),
    email: str = Form(...),
    message: str = Form(...),
    fan_art: UploadFile | None = File(None, alias="fanArt"),
    record_store: SqlRecordStore = Depends(get_record_store),
    blob_store: BlobStore = Depends(get_blob_store),
) -> dict:
    """Store the optional image, then record the submission pointing at it."""
    file_location = None
    try:
        if fan_art is not None and fan_art.filename:
            data = await fan_art.read()
            file_location = await blob_store.put(data, fan_art.filename)
    except (OSError, BotoCoreError, ClientError) as e:
        logger.exception("Error storing fan art: %s", e)
        raise SubmissionError() from e

    try:
        submission = await record_store.insert(
            {"name": name, "email": email, "message": message, "file": file_location}
        )
    except SQLAlchemyError as e:
        logger.exception("Error recording fan submission: %s", e)
        if file_location is not None:
            await _discard_upload(blob_store, file_location)
        raise SubmissionError() from e

    logger.info("Fan submission %s received from %s", submission["id"], name)
    return {"message": "Fan submission received!", "submission": submission}


async def _discard_upload(blob_store: BlobStore, location: str) -> None:
    """Remove a stored file whose submission row was never written."""
    try:
        await blob_store.delete(location)
    except (OSError, BotoCoreError, ClientError) as e:
        logger.warning("Could not remove orphaned upload %s: %s", location, e)
