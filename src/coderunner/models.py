"""Pydantic models for request and response bodies.

These models express the structure of the HTTP API.  The editor posts a
language tag and source text; the response carries either ``output`` or
``error``.  Fields that do not apply to a response are left out of the
JSON rather than sent as ``null``.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ExecuteRequest(BaseModel):
    """Request body for ``POST /execute``."""

    code: str = Field(..., description="Source code to execute.")
    language: str = Field(
        ...,
        description="Language tag. Supported server-side: 'python', 'java', 'cpp'.",
    )
    stdin: Optional[str] = Field(
        default=None, description="Standard input to pass to the program."
    )


class ExecuteResponse(BaseModel):
    """Response body for code execution.

    On success ``output`` is set (standard output, or standard error when
    the program wrote nothing to standard output) together with both raw
    streams.  On failure ``error`` holds the failed step's diagnostics and
    ``stage`` says whether the build or the run step failed.
    """

    output: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    duration_ms: Optional[int] = None
    error: Optional[str] = None
    stage: Optional[Literal["build", "run"]] = None


class ErrorResponse(BaseModel):
    error: str


class LanguagesResponse(BaseModel):
    languages: List[str] = Field(default_factory=list)
