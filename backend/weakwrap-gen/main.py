from fastapi import FastAPI, HTTPException # type: ignore
from pydantic import BaseModel, Field # type: ignore
from typing import Any, Dict, List

from registry import generate_for_code, generate_for_files

app = FastAPI(title="WeakWrap Generator (Java -> null-safe weak wrappers)")


class WrapReq(BaseModel):
    code: str
    filename: str | None = None
    write: bool = False              # also write into the generated source tree


class SourceFile(BaseModel):
    filename: str
    code: str


class WrapProjectReq(BaseModel):
    files: List[SourceFile] = Field(min_length=1)
    write: bool = False


class WrapResponse(BaseModel):
    wrappers: List[Dict[str, Any]]
    errors: List[Dict[str, str]]
    parse_errors: List[Dict[str, str]] = []
    warnings: List[str] = []


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/wrap", response_model=WrapResponse)
def wrap(req: WrapReq):
    try:
        result = generate_for_code(req.code, req.filename, write=req.write)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WrapResponse(**result)


@app.post("/wrap/project", response_model=WrapResponse)
def wrap_project(req: WrapProjectReq):
    sources = {f.filename: f.code for f in req.files}
    result = generate_for_files(sources, write=req.write)
    return WrapResponse(**result)
