"""Remote code execution service package.

This package runs programs submitted from the browser editor.  A request
carries source text and a language tag; the service writes the source
into a scratch directory of its own, compiles it when the language needs
it, runs it under a timeout and returns the captured output.  Scratch
directories are removed when the request finishes, however it finishes.

The top-level modules include:

* ``config`` – configuration handling for environment variables.
* ``languages`` – the supported languages and their runner settings.
* ``models`` – Pydantic models defining request and response schemas.
* ``workspace`` – per-request scratch directories and artifact cleanup.
* ``executor`` – language runners for Python, Java and C++.
* ``dispatcher`` – maps requests onto runners and shapes responses.
* ``hosted`` – client for the hosted execution API alternative.
* ``local`` – in-process evaluation for quick demos.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""

__version__ = "0.1.0"
