"""FastAPI application package for the survey tool.

Surveys are built from hierarchical, conditionally visible questions with
weighted options. Submissions are validated and scored by the engine in
`surveytool/logic/`; route handlers live in `surveytool/routes/`.
"""

from __future__ import annotations

from surveytool.main import create_app

__all__ = ["create_app"]
