"""
Main entry point for the Resume Gap Analyzer.
Reads a JSON document and outputs the gap analysis report as JSON.
"""

import sys
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from config import configure_logging
from gap_analyzer import analyze_resume_gap
from resume_models import Resume

logger = logging.getLogger(__name__)


def parse_input(text: str) -> Tuple[Dict[str, Any], Dict[str, Any], str]:
    """
    Parse input text into master resume, tailored resume and job description.

    Expected format:
    {
        "master_resume": {...},
        "tailored_resume": {...},
        "job_description": "..."
    }
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Input must be a JSON object")

    master = data.get('master_resume') or {}
    tailored = data.get('tailored_resume') or {}
    job_description = data.get('job_description') or ''

    if not isinstance(master, dict) or not isinstance(tailored, dict):
        raise ValueError("master_resume and tailored_resume must be JSON objects")
    if not isinstance(job_description, str):
        raise ValueError("job_description must be a string")

    return master, tailored, job_description


def _fail(message: str) -> None:
    print(json.dumps({"error": message}, ensure_ascii=False))
    sys.exit(1)


def main(argv: Optional[List[str]] = None):
    """Main function to process input and output JSON."""
    argv = sys.argv[1:] if argv is None else argv
    configure_logging()

    # Read input from file or stdin
    if argv:
        try:
            with open(argv[0], 'r', encoding='utf-8') as f:
                input_text = f.read()
        except OSError as e:
            _fail(f"Could not read input file: {e}")
    else:
        input_text = sys.stdin.read()

    try:
        master, tailored, job_description = parse_input(input_text)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        _fail(f"Invalid input: {e}")

    if not job_description.strip():
        _fail("job_description is required and cannot be empty")

    try:
        report = analyze_resume_gap(Resume.from_dict(master), Resume.from_dict(tailored), job_description)
    except Exception as e:
        logger.exception("Gap analysis failed")
        _fail(f"Analysis error: {str(e)}")

    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
