import logging
import time
import traceback
from typing import Optional
from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from flashread import config, extraction, summarizer
from flashread import chat as chat_gateway
from flashread import enhance as enhance_gateway
from flashread.errors import FlashReadError, ValidationError
from flashread.schemas import ChatRequest, Credentials, EnhanceRequest, SummarizeRequest

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ======================================
# App + CORS
# ======================================
app = FastAPI(
    title="FlashRead",
    description="Summarize web pages, raw text and documents, then chat about them",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten in prod
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ======================================
# Helpers
# ======================================
def credentials_from(request: Request) -> Credentials:
    """Per-request keys from headers; server env keys only fill in missing ones."""
    return Credentials(
        rapidapi_key=request.headers.get("x-rapidapi-key") or config.RAPIDAPI_KEY,
        groq_key=request.headers.get("x-groq-key") or config.GROQ_API_KEY,
    )


def error_response(e: FlashReadError) -> JSONResponse:
    return JSONResponse({"error": e.message}, status_code=e.status_code)


def unexpected_error(e: Exception, fallback: str, with_details: bool = False) -> JSONResponse:
    logger.exception("%s: %s", fallback, e)
    body = {"error": str(e) or fallback}
    if with_details and config.FLASHREAD_DEBUG:
        body["details"] = traceback.format_exc()
    return JSONResponse(body, status_code=500)


# ======================================
# Routes
# ======================================
@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "message": "FlashRead API is running!", "timestamp": time.time()}


@app.get("/api/documents/supported-formats")
async def get_supported_formats():
    return extraction.supported_formats()


@app.post("/api/summarize")
async def summarize(body: SummarizeRequest, request: Request):
    payload = body.url if body.mode == "url" else body.text
    try:
        result = await summarizer.summarize(
            body.mode,
            payload,
            provider=body.provider,
            length=body.length,
            credentials=credentials_from(request),
        )
        return {"summary": result.summary, "provider": result.provider}
    except FlashReadError as e:
        logger.warning("Summarize failed (%s): %s", type(e).__name__, e)
        return error_response(e)
    except Exception as e:
        return unexpected_error(e, "Unexpected error")


@app.post("/api/chat")
async def chat(body: ChatRequest, request: Request):
    try:
        response = await chat_gateway.chat(
            body.message,
            credentials_from(request),
            document_content=body.document_content,
            document_name=body.document_name,
            history=body.chat_history,
        )
        return {"response": response}
    except FlashReadError as e:
        logger.warning("Chat failed (%s): %s", type(e).__name__, e)
        return error_response(e)
    except Exception as e:
        return unexpected_error(e, "Failed to process chat message")


@app.post("/api/enhance-summary")
async def enhance_summary(body: EnhanceRequest, request: Request):
    try:
        enhanced = await enhance_gateway.enhance(
            body.content,
            credentials_from(request),
            document_name=body.document_name,
        )
        return {"enhanced": enhanced}
    except FlashReadError as e:
        logger.warning("Enhance failed (%s): %s", type(e).__name__, e)
        return error_response(e)
    except Exception as e:
        return unexpected_error(e, "Failed to enhance summary")


@app.post("/api/process-document")
async def process_document(file: Optional[UploadFile] = File(None)):
    try:
        if file is None:
            raise ValidationError("No file provided")
        content = await file.read()
        file_name = file.filename or ""
        file_type = file.content_type or ""
        extraction.validate_upload(file_name, file_type, len(content))

        result = await run_in_threadpool(extraction.extract, content, file_type, file_name)
        return {
            "success": True,
            "fileName": file_name,
            "fileType": file_type,
            "extractedText": result.text,
            "wordCount": result.word_count,
            "charCount": result.char_count,
        }
    except FlashReadError as e:
        logger.warning("Document processing failed (%s): %s", type(e).__name__, e)
        return error_response(e)
    except Exception as e:
        return unexpected_error(e, "Failed to process document", with_details=True)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
