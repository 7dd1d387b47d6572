from __future__ import annotations

from survey_sdk.core.logging import setup_logging
from survey_sdk.UI import run_app


def main() -> None:
    """Launch the Streamlit survey UI."""

    setup_logging()
    run_app()


if __name__ == "__main__":
    main()
