"""
Resume data model.
Loose JSON (as produced by the resume data service or an AI tailoring call)
is normalized into these dataclasses at the boundary, so analysis code never
deals with missing keys or mixed tag shapes.
"""

from collections import Counter
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class SkillTag:
    """Canonical tag"""
    name: str


def normalize_tags(raw_tags: Optional[Iterable[Any]]) -> List[SkillTag]:
    """Accept tags as plain strings or {'name': ...} dicts."""
    tags = []
    for tag in raw_tags or []:
        if isinstance(tag, SkillTag):
            name = tag.name
        elif isinstance(tag, dict):
            name = tag.get('name')
            if name is None or name == '':
                name = tag.get('tag')
        else:
            name = tag
        name = str(name).strip() if name is not None else ''
        if name:
            tags.append(SkillTag(name=name))
    return tags


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value) if value is not None else ''


def _items(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    return [item for item in (data.get(key) or []) if isinstance(item, dict)]


@dataclass
class Contact:
    """Contact section"""
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    professional_summary: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Contact':
        data = data or {}
        return cls(**{name: _text(data, name) for name in cls.__dataclass_fields__})


@dataclass
class SkillRecord:
    """Skill entry; identity is the lower-cased name"""
    name: str = ""
    tags: List[SkillTag] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.name.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SkillRecord':
        return cls(name=_text(data, 'name').strip(), tags=normalize_tags(data.get('tags')))


@dataclass
class ResponsibilityBullet:
    """Achievement bullet owned by an experience entry"""
    description: str = ""
    tags: List[SkillTag] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResponsibilityBullet':
        return cls(description=_text(data, 'description'), tags=normalize_tags(data.get('tags')))


@dataclass
class ExperienceEntry:
    """Work experience entry"""
    role: str = ""
    company: str = ""
    start_date: str = ""
    end_date: str = ""
    responsibilities: List[ResponsibilityBullet] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExperienceEntry':
        return cls(
            role=_text(data, 'role'),
            company=_text(data, 'company'),
            start_date=_text(data, 'start_date'),
            end_date=_text(data, 'end_date'),
            responsibilities=[ResponsibilityBullet.from_dict(r) for r in _items(data, 'responsibilities')],
        )


@dataclass
class EducationEntry:
    """Education entry"""
    degree: str = ""
    school: str = ""
    start_date: str = ""
    end_date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EducationEntry':
        return cls(**{name: _text(data, name) for name in cls.__dataclass_fields__})


@dataclass
class CertificationEntry:
    title: str = ""
    issued_date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CertificationEntry':
        return cls(title=_text(data, 'title'), issued_date=_text(data, 'issued_date'))


@dataclass
class ProjectEntry:
    title: str = ""
    description: str = ""
    tags: List[SkillTag] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectEntry':
        return cls(
            title=_text(data, 'title'),
            description=_text(data, 'description'),
            tags=normalize_tags(data.get('tags')),
        )


@dataclass
class VolunteerEntry:
    role: str = ""
    description: str = ""
    tags: List[SkillTag] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VolunteerEntry':
        return cls(
            role=_text(data, 'role'),
            description=_text(data, 'description'),
            tags=normalize_tags(data.get('tags')),
        )


@dataclass
class Resume:
    """Master or tailored resume. A master resume leaves summary empty."""
    contact: Contact = None
    summary: str = ""
    skills: List[SkillRecord] = None
    experience: List[ExperienceEntry] = None
    education: List[EducationEntry] = None
    certifications: List[CertificationEntry] = None
    projects: List[ProjectEntry] = None
    volunteer: List[VolunteerEntry] = None

    def __post_init__(self):
        if self.contact is None:
            self.contact = Contact()
        if self.skills is None:
            self.skills = []
        if self.experience is None:
            self.experience = []
        if self.education is None:
            self.education = []
        if self.certifications is None:
            self.certifications = []
        if self.projects is None:
            self.projects = []
        if self.volunteer is None:
            self.volunteer = []

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Resume':
        """Parse a loose resume dict; absent sections become empty."""
        data = data or {}
        return cls(
            contact=Contact.from_dict(data.get('contact')),
            summary=_text(data, 'summary'),
            skills=[SkillRecord.from_dict(s) for s in _items(data, 'skills') if s.get('name')],
            experience=[ExperienceEntry.from_dict(e) for e in _items(data, 'experience')],
            education=[EducationEntry.from_dict(e) for e in _items(data, 'education')],
            certifications=[CertificationEntry.from_dict(c) for c in _items(data, 'certifications')],
            projects=[ProjectEntry.from_dict(p) for p in _items(data, 'projects')],
            volunteer=[VolunteerEntry.from_dict(v) for v in _items(data, 'volunteer')],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def skill_keys(self) -> List[str]:
        return [skill.key for skill in self.skills]

    def all_bullets(self) -> List[ResponsibilityBullet]:
        return [bullet for exp in self.experience for bullet in exp.responsibilities]


def collect_tag_counts(resume: Resume) -> Counter:
    """Count how often each tag is used across the resume."""
    counts = Counter()
    tagged = list(resume.skills) + resume.all_bullets() + list(resume.projects) + list(resume.volunteer)
    for item in tagged:
        for tag in item.tags:
            counts[tag.name] += 1
    return counts


def render_resume_text(resume: Resume) -> str:
    """Format a resume into ATS-friendly plain text"""
    lines = []

    if resume.contact.name:
        lines.append(resume.contact.name.upper())
        lines.append("")

    contact_info = [value for value in (
        resume.contact.email, resume.contact.phone, resume.contact.location,
        resume.contact.linkedin, resume.contact.github,
    ) if value]
    if contact_info:
        lines.append(" | ".join(contact_info))
        lines.append("")

    summary = resume.summary or resume.contact.professional_summary
    if summary:
        lines.append("PROFESSIONAL SUMMARY")
        lines.append("=" * 50)
        lines.append(summary)
        lines.append("")

    if resume.experience:
        lines.append("WORK EXPERIENCE")
        lines.append("=" * 50)
        for exp in resume.experience:
            job_line = exp.role
            if exp.company:
                job_line += f" | {exp.company}"
            if exp.start_date or exp.end_date:
                job_line += f" | {exp.start_date} - {exp.end_date or 'Present'}"
            lines.append(job_line)
            lines.append("")
            for bullet in exp.responsibilities:
                lines.append(f"• {bullet.description}")
            lines.append("")

    if resume.skills:
        lines.append("SKILLS")
        lines.append("=" * 50)
        lines.append(", ".join(skill.name for skill in resume.skills))
        lines.append("")

    if resume.education:
        lines.append("EDUCATION")
        lines.append("=" * 50)
        for edu in resume.education:
            edu_line = edu.degree
            if edu.school:
                edu_line += f" | {edu.school}"
            if edu.end_date:
                edu_line += f" | {edu.end_date}"
            lines.append(edu_line)
        lines.append("")

    if resume.certifications:
        lines.append("CERTIFICATIONS")
        lines.append("=" * 50)
        for cert in resume.certifications:
            lines.append(f"• {cert.title}")
        lines.append("")

    if resume.projects:
        lines.append("PROJECTS")
        lines.append("=" * 50)
        for project in resume.projects:
            if project.title:
                lines.append(project.title)
            if project.description:
                lines.append(f"• {project.description}")
            lines.append("")

    if resume.volunteer:
        lines.append("VOLUNTEER")
        lines.append("=" * 50)
        for vol in resume.volunteer:
            lines.append(vol.role)
            if vol.description:
                lines.append(f"• {vol.description}")
        lines.append("")

    return '\n'.join(lines)
