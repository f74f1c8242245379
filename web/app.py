"""FastAPI web adapter for the LC-3 virtual machine."""

import base64
import binascii
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from lc3vm import run_program, RunOptions


# Constants
MAX_IMAGE_SIZE = 2 * (1 << 16) + 2  # origin word plus a full address space
MAX_IMAGES = 8


# Request/Response models
class RunOptionsModel(BaseModel):
    max_steps: int = Field(default=1_000_000, ge=1, le=50_000_000)
    start_pc: int = Field(default=0x3000, ge=0, le=0xFFFF)
    keyboard_mmio: bool = False
    echo_prompt: bool = True
    watch: list[int] = Field(default_factory=list)
    initial_memory: dict[str, int] = Field(default_factory=dict)


class RunRequest(BaseModel):
    image: Optional[str] = None  # base64 .obj bytes
    images: list[str] = Field(default_factory=list)
    input: str = ""
    options: Optional[RunOptionsModel] = None


class RunResponse(BaseModel):
    status: str
    output_text: str
    steps_executed: int
    final_state: dict
    final_memory: dict[str, int]
    error: Optional[dict] = None


def _decode_image(encoded: str) -> bytes:
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Image is not valid base64")
    if len(data) > MAX_IMAGE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Image size exceeds limit of {MAX_IMAGE_SIZE} bytes",
        )
    return data


def _parse_address(key: str) -> int:
    """Accept decimal, 0x-prefixed hex, or LC-3 style x3000 keys."""
    text = key.strip()
    try:
        if text[:1] in ("x", "X"):
            return int(text[1:], 16)
        return int(text, 0)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid memory address key: {key}",
        )


# Create FastAPI app
app = FastAPI(
    title="LC-3 Virtual Machine",
    description="Web API for executing LC-3 program images",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/run", response_model=RunResponse)
async def run_image(request: RunRequest):
    """Execute one or more LC-3 program images.

    Args:
        request: Base64 images, console input, and execution options

    Returns:
        Execution result with console output and final machine state
    """
    encoded = ([request.image] if request.image else []) + request.images
    if not encoded:
        raise HTTPException(status_code=400, detail="No image supplied")
    if len(encoded) > MAX_IMAGES:
        raise HTTPException(
            status_code=400,
            detail=f"At most {MAX_IMAGES} images per run",
        )
    images = [_decode_image(item) for item in encoded]

    # Build options
    opts = request.options or RunOptionsModel()
    initial_memory = {_parse_address(k): v for k, v in opts.initial_memory.items()}

    run_opts = RunOptions(
        max_steps=opts.max_steps,
        start_pc=opts.start_pc,
        keyboard_mmio=opts.keyboard_mmio,
        echo_prompt=opts.echo_prompt,
        watch=opts.watch,
        initial_memory=initial_memory,
    )

    # Execute program
    result = run_program(images, input_text=request.input, options=run_opts)

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8080)
