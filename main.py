import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from cfg_generator import generate_cfg
from config import configure_logging, get_settings
from dot_export import to_dot
from models import CFG
from remote_client import RemoteFetchResult, fetch_remote_cfg

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="CFG Generator API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,  # frontend URL(s)
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CodeInput(BaseModel):
    c_code: str


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/generate-cfg", response_model=CFG)
async def generate_cfg_endpoint(code_input: CodeInput):
    try:
        return generate_cfg(code_input.c_code)
    except Exception as e:
        logger.exception("CFG generation failed")
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/generate-cfg/dot", response_class=PlainTextResponse)
async def generate_dot_endpoint(code_input: CodeInput):
    """DOT document for download as cfg.dot"""
    try:
        dot = to_dot(generate_cfg(code_input.c_code))
    except Exception as e:
        logger.exception("DOT export failed")
        raise HTTPException(status_code=400, detail=str(e))

    return PlainTextResponse(
        dot,
        media_type="text/vnd.graphviz",
        headers={"Content-Disposition": 'attachment; filename="cfg.dot"'},
    )


@app.post("/generate-cfg/remote", response_model=RemoteFetchResult)
def remote_cfg_endpoint(code_input: CodeInput):
    """
    Fetch the CFG from the configured remote service.

    Always answers 200; remote failures are reported through status/message.
    """
    result = fetch_remote_cfg(code_input.c_code)
    if not result.ok:
        logger.info("Remote CFG unavailable: %s", result.message)
    return result


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
