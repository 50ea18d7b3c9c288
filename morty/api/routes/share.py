"""Shareable-link routes: encode/decode loan parameters as a query string."""

import logging

from fastapi import APIRouter, HTTPException

from morty.api.schemas import LoanParametersSchema, ShareDecodeRequest, ShareEncodeResponse
from morty.data.url_state import decode_params, encode_params
from morty.engine.validation import validate_parameters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/share", tags=["share"])


@router.post("/encode", response_model=ShareEncodeResponse)
async def encode_share_link(req: LoanParametersSchema):
    return ShareEncodeResponse(query=encode_params(req.to_params()))


@router.post("/decode", response_model=LoanParametersSchema)
async def decode_share_link(req: ShareDecodeRequest):
    """Parse a share link back into loan parameters."""
    try:
        params = decode_params(req.query)
        validate_parameters(params)
    except ValueError as e:
        logger.info("Rejected share link: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    return LoanParametersSchema.from_params(params)
