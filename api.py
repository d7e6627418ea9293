"""
FastAPI REST API for Resume Gap Analysis and Tailoring
"""

import json
import logging
import uuid
from io import BytesIO
from typing import Any, Dict, List, Optional

import pdfplumber
from fastapi import FastAPI, File, UploadFile, Form, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

from config import configure_logging, load_settings
from gap_analyzer import analyze_bullet_quality, analyze_resume_gap, format_report_text
from keyword_extractor import (
    extract_benefits,
    extract_keywords,
    extract_pay_range,
    extract_responsibilities,
    extract_skills,
)
from resume_models import Resume, collect_tag_counts, render_resume_text
from resume_tailor import (
    BulletOptimizer,
    generate_ideal_resume,
    generate_tag_based_resume,
    tags_for_job_type,
    tailor_resume_mock,
)
from skill_taxonomy import JOB_TYPE_MAPPINGS
from tag_autocomplete import TagAutocomplete

logger = logging.getLogger(__name__)


class MasterResumeRequest(BaseModel):
    """Request model for master-resume endpoint"""
    master_resume: Dict[str, Any]


class GapAnalysisRequest(BaseModel):
    """Request model for gap-analysis endpoints. Master resume inline or by session_id."""
    job_description: str
    tailored_resume: Dict[str, Any]
    master_resume: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None


class JobDescriptionRequest(BaseModel):
    """Request model for endpoints that only need a job description"""
    job_description: str


class AnalyzeBulletRequest(BaseModel):
    bullet: str


class TailorRequest(BaseModel):
    job_description: str
    master_resume: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None


class TagResumeRequest(BaseModel):
    master_resume: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None
    tags: Optional[List[str]] = None
    job_type: Optional[str] = None


class OptimizeBulletRequest(BaseModel):
    bullet: str
    job_description: str
    use_llm: Optional[bool] = None


class AddTagRequest(BaseModel):
    session_id: str
    tag: str


settings = load_settings()

app = FastAPI(
    title="Resume Gap Analysis API",
    description="API for comparing tailored resumes against a master resume and a job description",
    version="1.0.0"
)


# Add exception handler for validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed messages"""
    error_details = []
    for error in exc.errors():
        error_details.append({
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        })
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "errors": error_details
        }
    )


# Enable CORS for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Master resumes by session id (in production, use a database)
resume_storage: Dict[str, Dict[str, Any]] = {}


def _require_text(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"{field_name} is required and cannot be empty")
    return value


def _resolve_master(master_resume: Optional[Dict[str, Any]], session_id: Optional[str]) -> Resume:
    """Master resume from the request body, else from the session store."""
    if master_resume is not None:
        return Resume.from_dict(master_resume)
    if not session_id:
        raise HTTPException(status_code=400, detail="Either master_resume or session_id is required")
    if session_id not in resume_storage:
        raise HTTPException(
            status_code=404,
            detail=f"Session ID '{session_id}' not found. Please store a master resume first using /api/master-resume."
        )
    return resume_storage[session_id]['master_resume']


def _parse_json_field(raw: Optional[str], field_name: str) -> Optional[Dict[str, Any]]:
    if raw is None or not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"{field_name} is not valid JSON: {e}")
    if not isinstance(value, dict):
        raise HTTPException(status_code=400, detail=f"{field_name} must be a JSON object")
    return value


def extract_text_from_file(file_content: bytes, filename: str) -> str:
    """Extract text from an uploaded .txt or .pdf file."""
    if (filename or '').lower().endswith('.pdf'):
        try:
            with pdfplumber.open(BytesIO(file_content)) as pdf:
                text = '\n'.join(page.extract_text() or '' for page in pdf.pages)
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Error reading PDF: {str(e)}")
        if text.strip():
            return text
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from PDF. Please upload a .txt file or ensure PDF is readable."
        )

    try:
        return file_content.decode('utf-8')
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file format. Please upload a .txt or .pdf file."
        )


REPORT_SECTION_HEADINGS = ('SKILLS', 'EXPERIENCE', 'ATS', 'RECOMMENDATIONS')


def _escape(text: str) -> str:
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def generate_pdf_from_text(text: str) -> BytesIO:
    """Generate a PDF from a plain-text gap analysis report"""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter,
                            rightMargin=0.75*inch, leftMargin=0.75*inch,
                            topMargin=0.75*inch, bottomMargin=0.75*inch)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=16,
        textColor='#000000',
        spaceAfter=12,
        alignment=1,  # Center
        fontName='Helvetica-Bold'
    )
    heading_style = ParagraphStyle(
        'ReportHeading',
        parent=styles['Heading2'],
        fontSize=14,
        textColor='#000000',
        spaceAfter=6,
        spaceBefore=12,
        fontName='Helvetica-Bold'
    )
    normal_style = ParagraphStyle(
        'ReportNormal',
        parent=styles['Normal'],
        fontSize=11,
        textColor='#000000',
        spaceAfter=6,
        leading=14,
        fontName='Helvetica'
    )

    elements = []
    first_line = True
    for line in text.split('\n'):
        line_stripped = line.strip()

        if not line_stripped:
            elements.append(Spacer(1, 6))
            continue

        if first_line:
            elements.append(Paragraph(f"<b>{_escape(line_stripped)}</b>", title_style))
            first_line = False
        elif line_stripped in REPORT_SECTION_HEADINGS:
            elements.append(Spacer(1, 12))
            elements.append(Paragraph(f"<b>{line_stripped}</b>", heading_style))
        elif line_stripped.startswith('- '):
            elements.append(Paragraph(f"• {_escape(line_stripped[2:])}", normal_style))
        else:
            elements.append(Paragraph(_escape(line_stripped), normal_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer


def _session_autocomplete(session_id: str) -> TagAutocomplete:
    session = resume_storage[session_id]
    if 'autocomplete' not in session:
        # reads the session at load time so a replaced master is picked up after invalidate()
        session['autocomplete'] = TagAutocomplete(
            loader=lambda: list(collect_tag_counts(session['master_resume'])),
            ttl=settings.tag_cache_ttl
        )
    return session['autocomplete']


def _job_type_tags() -> List[str]:
    tags = []
    for _, job_tags in JOB_TYPE_MAPPINGS.values():
        tags.extend(tag for tag in job_tags if tag not in tags)
    return tags


job_type_autocomplete = TagAutocomplete(loader=_job_type_tags, ttl=settings.tag_cache_ttl)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return JSONResponse({
        "status": "healthy",
        "service": "Resume Gap Analysis API"
    })


@app.get("/api/llm-status")
async def llm_status():
    """Check LLM configuration for bullet optimization."""
    optimizer = BulletOptimizer(
        use_llm=settings.use_llm,
        llm_api_key=settings.llm_api_key,
        llm_provider=settings.llm_provider
    )
    status = {
        "llm_provider": settings.llm_provider,
        "use_llm": settings.use_llm,
        "api_keys": {
            "perplexity": "set" if settings.perplexity_api_key else "not set",
            "openai": "set" if settings.openai_api_key else "not set",
            "anthropic": "set" if settings.anthropic_api_key else "not set"
        },
        "llm_available": optimizer.llm_available
    }
    if not optimizer.llm_available:
        status["message"] = "LLM not available. Set USE_LLM=true and an API key in .env file."
    return JSONResponse(status)


@app.get("/api/job-types")
async def job_types():
    """Predefined job types with their tag sets."""
    return JSONResponse({
        "success": True,
        "job_types": [
            {"name": name, "description": description, "tags": list(tags)}
            for name, (description, tags) in JOB_TYPE_MAPPINGS.items()
        ]
    })


@app.post("/api/master-resume")
async def store_master_resume(request: MasterResumeRequest):
    """
    Store a master resume.
    Returns a session ID to use for gap analysis, tailoring and tag suggestions.
    """
    session_id = str(uuid.uuid4())
    master = Resume.from_dict(request.master_resume)
    resume_storage[session_id] = {'master_resume': master}
    logger.info("Stored master resume for session %s (%d skills)", session_id, len(master.skills))

    return JSONResponse({
        "success": True,
        "session_id": session_id,
        "message": "Master resume stored successfully"
    })


@app.put("/api/master-resume/{session_id}")
async def update_master_resume(session_id: str, request: MasterResumeRequest):
    """Replace the master resume of an existing session and refresh its tag suggestions."""
    if session_id not in resume_storage:
        raise HTTPException(status_code=404, detail="Session not found")

    session = resume_storage[session_id]
    session['master_resume'] = Resume.from_dict(request.master_resume)
    if 'autocomplete' in session:
        session['autocomplete'].invalidate()
    logger.info("Replaced master resume for session %s", session_id)

    return JSONResponse({
        "success": True,
        "session_id": session_id,
        "message": "Master resume updated successfully"
    })


@app.delete("/api/session/{session_id}")
async def delete_session(session_id: str):
    """Delete a session and clear stored resume."""
    if session_id in resume_storage:
        del resume_storage[session_id]
        return JSONResponse({
            "success": True,
            "message": "Session deleted"
        })
    raise HTTPException(status_code=404, detail="Session not found")


@app.post("/api/gap-analysis")
async def gap_analysis(request: GapAnalysisRequest):
    """
    Analyze a tailored resume against the master resume and a job description.

    Accepts JSON body with:
    - job_description: Job description text
    - tailored_resume: Tailored resume object
    - master_resume: Master resume object (optional if session_id is given)
    - session_id: Session ID from master-resume endpoint (optional)
    """
    try:
        _require_text(request.job_description, "job_description")
        master = _resolve_master(request.master_resume, request.session_id)
        tailored = Resume.from_dict(request.tailored_resume)

        report = analyze_resume_gap(master, tailored, request.job_description)

        return JSONResponse({
            "success": True,
            "analysis": report.to_dict()
        })

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Gap analysis failed")
        raise HTTPException(status_code=500, detail=f"Analysis error: {str(e)}")


@app.post("/api/gap-analysis/pdf")
async def gap_analysis_pdf(request: GapAnalysisRequest):
    """Run a gap analysis and download the report as a PDF file."""
    try:
        _require_text(request.job_description, "job_description")
        master = _resolve_master(request.master_resume, request.session_id)
        tailored = Resume.from_dict(request.tailored_resume)

        report = analyze_resume_gap(master, tailored, request.job_description)
        pdf_content = generate_pdf_from_text(format_report_text(report)).read()

        return Response(
            content=pdf_content,
            media_type="application/pdf",
            headers={
                "Content-Disposition": 'attachment; filename="gap_analysis.pdf"',
                "Content-Length": str(len(pdf_content))
            }
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Gap analysis PDF export failed")
        raise HTTPException(status_code=500, detail=f"Failed to generate PDF: {str(e)}")


@app.post("/api/gap-analysis-with-file")
async def gap_analysis_with_file(
    file: UploadFile = File(...),
    tailored_resume: str = Form(...),
    master_resume: Optional[str] = Form(None),
    session_id: Optional[str] = Form(None)
):
    """
    Upload a job description file and run the gap analysis in one request.

    Parameters:
    - file: Job description file (PDF or TXT)
    - tailored_resume: Tailored resume as a JSON string
    - master_resume: Master resume as a JSON string (optional if session_id is given)
    - session_id: Session ID from master-resume endpoint (optional)
    """
    try:
        file_content = await file.read()
        job_description = _require_text(extract_text_from_file(file_content, file.filename), "job_description")

        master = _resolve_master(_parse_json_field(master_resume, "master_resume"), session_id)
        tailored = Resume.from_dict(_parse_json_field(tailored_resume, "tailored_resume"))

        report = analyze_resume_gap(master, tailored, job_description)

        return JSONResponse({
            "success": True,
            "filename": file.filename,
            "analysis": report.to_dict()
        })

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Gap analysis with file failed")
        raise HTTPException(status_code=500, detail=f"Analysis error: {str(e)}")


@app.post("/api/extract-requirements")
async def extract_requirements(request: JobDescriptionRequest):
    """Skills, keywords, responsibilities, benefits and pay range found in a job description."""
    job_description = _require_text(request.job_description, "job_description")
    return JSONResponse({
        "success": True,
        "skills": extract_skills(job_description),
        "keywords": extract_keywords(job_description),
        "responsibilities": extract_responsibilities(job_description),
        "benefits": extract_benefits(job_description),
        "pay_range": extract_pay_range(job_description)
    })


@app.post("/api/analyze-bullet")
async def analyze_bullet(request: AnalyzeBulletRequest):
    """Score a single responsibility bullet."""
    _require_text(request.bullet, "bullet")
    return JSONResponse({
        "success": True,
        "analysis": analyze_bullet_quality(request.bullet).to_dict()
    })


@app.post("/api/tailor")
async def tailor(request: TailorRequest):
    """Tailor the master resume to a job description using keyword matching."""
    try:
        _require_text(request.job_description, "job_description")
        master = _resolve_master(request.master_resume, request.session_id)
        result = tailor_resume_mock(request.job_description, master)

        return JSONResponse({
            "success": True,
            "result": result.to_dict(),
            "resume_text": render_resume_text(result.tailored_resume)
        })

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Tailoring failed")
        raise HTTPException(status_code=500, detail=f"Tailoring error: {str(e)}")


@app.post("/api/ideal-resume")
async def ideal_resume(request: JobDescriptionRequest):
    """Generate the ideal resume for a job description."""
    _require_text(request.job_description, "job_description")
    return JSONResponse({
        "success": True,
        "resume": generate_ideal_resume(request.job_description).to_dict()
    })


@app.post("/api/tag-resume")
async def tag_resume(request: TagResumeRequest):
    """Filter the master resume by tags, or by the tag set of a predefined job type."""
    master = _resolve_master(request.master_resume, request.session_id)

    tags = list(request.tags or [])
    if request.job_type:
        job_tags = tags_for_job_type(request.job_type)
        if not job_tags:
            raise HTTPException(status_code=404, detail=f"Unknown job type '{request.job_type}'")
        tags.extend(tag for tag in job_tags if tag not in tags)

    resume = generate_tag_based_resume(master, tags)
    return JSONResponse({
        "success": True,
        "tags": tags,
        "resume": resume.to_dict(),
        "resume_text": render_resume_text(resume)
    })


@app.post("/api/optimize-bullet")
def optimize_bullet(request: OptimizeBulletRequest):
    """
    Rewrite a bullet in STAR form.
    use_llm overrides the USE_LLM setting when given; the rule-based rewrite
    is used whenever no LLM is available.
    """
    _require_text(request.bullet, "bullet")
    use_llm = settings.use_llm if request.use_llm is None else request.use_llm
    optimizer = BulletOptimizer(
        use_llm=use_llm,
        llm_api_key=settings.llm_api_key,
        llm_provider=settings.llm_provider
    )
    result = optimizer.optimize(request.bullet, request.job_description or '')

    return JSONResponse({
        "success": True,
        "original_text": request.bullet,
        **result
    })


@app.get("/api/tags/suggest")
async def suggest_tags(q: str = '', session_id: Optional[str] = None):
    """
    Tag suggestions for autocomplete.
    With a session_id, suggests tags from that master resume ranked by usage;
    otherwise suggests from the predefined job-type tags.
    """
    if session_id is None:
        return JSONResponse({"success": True, "suggestions": job_type_autocomplete.suggestions(q)})

    if session_id not in resume_storage:
        raise HTTPException(status_code=404, detail="Session not found")

    counts = collect_tag_counts(resume_storage[session_id]['master_resume'])
    return JSONResponse({
        "success": True,
        "suggestions": _session_autocomplete(session_id).suggestions_with_counts(q, counts)
    })


@app.post("/api/tags")
async def add_tag(request: AddTagRequest):
    """Register a newly created tag so it is suggested first for the session."""
    tag = _require_text(request.tag, "tag").strip()
    if request.session_id not in resume_storage:
        raise HTTPException(status_code=404, detail="Session not found")

    _session_autocomplete(request.session_id).add_tag(tag)
    return JSONResponse({"success": True, "tag": tag})


if __name__ == "__main__":
    import uvicorn
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
