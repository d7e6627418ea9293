"""
Resume Gap Analysis
Compares a tailored resume against the master resume and a job description
and produces a scored report with prioritized recommendations.
"""

import logging
import math
import re
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from keyword_extractor import extract_keywords, extract_responsibilities, extract_skills
from resume_models import Resume
from skill_taxonomy import ACTION_VERBS, IMPACT_WORDS, TECH_TERMS, TRANSFERABLE_SKILLS

logger = logging.getLogger(__name__)

WEAK_BULLET_THRESHOLD = 60
PRIORITY_ORDER = {'critical': 0, 'high': 1, 'medium': 2, 'low': 3}

# Overall score weights
SKILLS_WEIGHT = 0.35
BULLET_QUALITY_WEIGHT = 0.30
ATS_WEIGHT = 0.20
EXPERIENCE_WEIGHT = 0.15

_QUANTIFIER = re.compile(r'\d+|%|\$|million|billion|thousand|users|clients|applications')


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


@dataclass
class SkillMatch:
    name: str
    status: str  # matched | partial | missing
    in_master_resume: bool
    in_tailored_resume: bool
    alternatives: List[str] = field(default_factory=list)


@dataclass
class SkillsGapAnalysis:
    required_skills: List[SkillMatch]
    matched_skills: List[SkillMatch]
    missing_skills: List[SkillMatch]
    match_percentage: int


@dataclass
class BulletAnalysis:
    description: str
    score: int
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ExperienceGapAnalysis:
    total_bullets: int
    relevant_bullets: int
    weak_bullets: List[BulletAnalysis]
    missing_keywords: List[str]
    bullet_quality_score: int


@dataclass
class KeywordDensity:
    keyword: str
    count: int
    optimal: int
    status: str  # good | low | high


@dataclass
class ATSAnalysis:
    score: int
    keyword_density: List[KeywordDensity]
    formatting_issues: List[str]
    suggestions: List[str]


@dataclass
class Recommendation:
    type: str  # skill | experience | keyword | format
    priority: str  # critical | high | medium | low
    title: str
    description: str
    actionable: str


@dataclass
class GapAnalysisReport:
    overall_score: int
    skills_analysis: SkillsGapAnalysis
    experience_analysis: ExperienceGapAnalysis
    ats_score: ATSAnalysis
    recommendations: List[Recommendation]

    def to_dict(self) -> Dict:
        return asdict(self)


def analyze_bullet_quality(bullet: str) -> BulletAnalysis:
    """Score a single achievement bullet on a fixed 100-point rubric."""
    bullet = bullet or ''
    bullet_lower = bullet.lower()
    score = 0
    issues = []
    suggestions = []

    if any(verb in bullet_lower for verb in ACTION_VERBS):
        score += 20
    else:
        issues.append('Missing action verb')
        suggestions.append('Start with a strong action verb (designed, developed, led, etc.)')

    if _QUANTIFIER.search(bullet):
        score += 30
    else:
        issues.append('No quantifiable metrics')
        suggestions.append('Add numbers, percentages, or measurable impact')

    if any(word in bullet_lower for word in IMPACT_WORDS):
        score += 25
    else:
        issues.append('Unclear impact or result')
        suggestions.append('Describe the outcome or business impact')

    word_count = len(bullet.split())
    if 10 <= word_count <= 25:
        score += 15
    elif word_count < 10:
        issues.append('Too brief')
        suggestions.append('Add more context and details (aim for 10-25 words)')
    else:
        issues.append('Too long')
        suggestions.append('Condense to 10-25 words for better readability')

    if any(term in bullet_lower for term in TECH_TERMS):
        score += 10

    return BulletAnalysis(
        description=bullet,
        score=max(0, min(100, score)),
        issues=issues,
        suggestions=suggestions
    )


def find_alternative_skills(target_skill: str, available_skills: List[str]) -> List[str]:
    """Transferable skills for target_skill that appear in available_skills (lower-cased)."""
    related = TRANSFERABLE_SKILLS.get(target_skill.lower(), ())
    available = set(available_skills)
    return [alt for alt in related if alt in available]


def flatten_resume_text(resume: Resume) -> str:
    """Flatten the searchable parts of a resume into one lower-cased string."""
    parts = [resume.summary or '']
    parts.extend(skill.name for skill in resume.skills)
    for exp in resume.experience:
        parts.append(exp.role)
        parts.append(exp.company)
        parts.extend(resp.description for resp in exp.responsibilities)
    for project in resume.projects:
        parts.append(project.title)
        parts.append(project.description or '')
    return ' '.join(parts).lower()


class ResumeGapAnalyzer:
    """Gap analysis of a tailored resume against its master resume and a job description."""

    def __init__(self, master_resume: Resume, tailored_resume: Resume, job_description: str):
        self.master_resume = master_resume
        self.tailored_resume = tailored_resume
        self.job_description = job_description or ''

    def compare_skills(self, job_skills: List[str]) -> SkillsGapAnalysis:
        """Match status of every required skill against master and tailored skill lists."""
        master_skills = self.master_resume.skill_keys()
        master_set = set(master_skills)
        tailored_set = set(self.tailored_resume.skill_keys())

        # Skills already placed in the tailored resume count as required too
        required_names = {}
        for name in list(job_skills) + [skill.name for skill in self.tailored_resume.skills]:
            required_names.setdefault(name.lower(), name)

        required_skills = []
        for key, name in required_names.items():
            in_master = key in master_set
            in_tailored = key in tailored_set
            alternatives = find_alternative_skills(name, master_skills)

            if in_master and in_tailored:
                status = 'matched'
            elif in_master or alternatives:
                status = 'partial'
            else:
                status = 'missing'

            required_skills.append(SkillMatch(
                name=name,
                status=status,
                in_master_resume=in_master,
                in_tailored_resume=in_tailored,
                alternatives=alternatives
            ))

        matched = [s for s in required_skills if s.status == 'matched']
        missing = [s for s in required_skills if s.status == 'missing']
        match_percentage = (
            round_half_up(len(matched) / len(required_skills) * 100) if required_skills else 100
        )

        return SkillsGapAnalysis(
            required_skills=required_skills,
            matched_skills=matched,
            missing_skills=missing,
            match_percentage=match_percentage
        )

    def analyze_experience(self, job_keywords: List[str],
                           job_responsibilities: Optional[List[str]] = None) -> ExperienceGapAnalysis:
        """Relevance and quality of every responsibility bullet in the tailored resume."""
        total_bullets = 0
        relevant_bullets = 0
        weak_bullets = []
        found_keywords = set()

        for exp in self.tailored_resume.experience:
            for resp in exp.responsibilities:
                total_bullets += 1
                description_lower = resp.description.lower()

                hits = [keyword for keyword in job_keywords if keyword.lower() in description_lower]
                if hits:
                    relevant_bullets += 1
                    found_keywords.update(hits)

                analysis = analyze_bullet_quality(resp.description)
                if analysis.score < WEAK_BULLET_THRESHOLD:
                    weak_bullets.append(analysis)

        missing_keywords = [keyword for keyword in job_keywords if keyword not in found_keywords]

        if total_bullets == 0:
            bullet_quality_score = 0
        elif not weak_bullets:
            bullet_quality_score = 100
        else:
            bullet_quality_score = round_half_up((total_bullets - len(weak_bullets)) / total_bullets * 100)

        return ExperienceGapAnalysis(
            total_bullets=total_bullets,
            relevant_bullets=relevant_bullets,
            weak_bullets=weak_bullets,
            missing_keywords=missing_keywords,
            bullet_quality_score=bullet_quality_score
        )

    def calculate_ats_score(self, job_keywords: List[str]) -> ATSAnalysis:
        """Keyword density against job keywords, minus formatting penalties."""
        resume = self.tailored_resume
        resume_text = flatten_resume_text(resume)
        keyword_density = []
        formatting_issues = []
        suggestions = []

        for keyword in job_keywords:
            count = len(re.findall(re.escape(keyword), resume_text, re.IGNORECASE))
            optimal = 2 if len(keyword) > 8 else 3

            if count == 0:
                status = 'low'
                suggestions.append(f'Add keyword "{keyword}" to your resume')
            elif count < optimal:
                status = 'low'
                suggestions.append(f'Increase usage of "{keyword}" (currently {count}x, optimal {optimal}x)')
            elif count > optimal * 2:
                status = 'high'
                suggestions.append(f'Reduce usage of "{keyword}" to avoid keyword stuffing')
            else:
                status = 'good'

            keyword_density.append(KeywordDensity(keyword=keyword, count=count, optimal=optimal, status=status))

        if not resume.contact.email or not resume.contact.phone:
            formatting_issues.append('Missing contact information')
        if not resume.summary or len(resume.summary) < 50:
            formatting_issues.append('Professional summary is too short or missing')
        if len(resume.skills) < 10:
            formatting_issues.append('Skills section has fewer than 10 items')

        good_keywords = sum(1 for k in keyword_density if k.status == 'good')
        keyword_score = good_keywords / len(keyword_density) * 100 if keyword_density else 0
        format_penalty = len(formatting_issues) * 10
        score = max(0, round_half_up(keyword_score - format_penalty))

        return ATSAnalysis(
            score=score,
            keyword_density=keyword_density,
            formatting_issues=formatting_issues,
            suggestions=suggestions
        )

    def generate_recommendations(self, skills_analysis: SkillsGapAnalysis,
                                 experience_analysis: ExperienceGapAnalysis,
                                 ats_analysis: ATSAnalysis) -> List[Recommendation]:
        """Turn the analyses into a priority-sorted list of actionable recommendations."""
        recommendations = []

        for skill in skills_analysis.missing_skills:
            recommendations.append(Recommendation(
                type='skill',
                priority='critical',
                title=f'Missing Required Skill: {skill.name}',
                description='This skill is required for the job but not found in your resume.',
                actionable=f'Add {skill.name} to your skills section or highlight it in your experience'
            ))

        for skill in skills_analysis.required_skills:
            if skill.status != 'partial':
                continue
            if skill.alternatives:
                description = f'You have {", ".join(skill.alternatives)} but not {skill.name} specifically listed.'
            else:
                description = f'{skill.name} is in your master resume but not in this tailored resume.'
            recommendations.append(Recommendation(
                type='skill',
                priority='high',
                title=f'Skill Not Highlighted: {skill.name}',
                description=description,
                actionable=f'Add {skill.name} to your skills section or mention it in a responsibility bullet'
            ))

        for bullet in experience_analysis.weak_bullets[:5]:
            recommendations.append(Recommendation(
                type='experience',
                priority='high',
                title=f'Weak Bullet Point (Score: {bullet.score}/100)',
                description=bullet.description[:100] + '...',
                actionable=bullet.suggestions[0] if bullet.suggestions else 'Strengthen this bullet with metrics and impact'
            ))

        missing_keywords = experience_analysis.missing_keywords
        if missing_keywords:
            recommendations.append(Recommendation(
                type='keyword',
                priority='medium',
                title=f'Missing {len(missing_keywords)} Key Terms',
                description=f'Keywords from job description not found in experience: {", ".join(missing_keywords[:5])}',
                actionable='Incorporate these keywords naturally into your responsibility bullets'
            ))

        low_keywords = [k for k in ats_analysis.keyword_density if k.status == 'low']
        if low_keywords:
            recommendations.append(Recommendation(
                type='keyword',
                priority='medium',
                title='ATS Keyword Optimization Needed',
                description=f'{len(low_keywords)} important keywords appear too infrequently',
                actionable=f'Increase usage of: {", ".join(k.keyword for k in low_keywords[:3])}'
            ))

        for issue in ats_analysis.formatting_issues:
            recommendations.append(Recommendation(
                type='format',
                priority='low',
                title='Formatting Issue',
                description=issue,
                actionable='Review and update the affected section'
            ))

        recommendations.sort(key=lambda r: PRIORITY_ORDER[r.priority])
        return recommendations

    def analyze(self) -> GapAnalysisReport:
        """Perform the complete gap analysis."""
        job_skills = extract_skills(self.job_description)
        job_keywords = extract_keywords(self.job_description)
        job_responsibilities = extract_responsibilities(self.job_description)

        skills_analysis = self.compare_skills(job_skills)
        experience_analysis = self.analyze_experience(job_keywords, job_responsibilities)
        ats_analysis = self.calculate_ats_score(job_keywords)

        has_experience = 100 if self.tailored_resume.experience else 0
        overall_score = clamp_score(
            skills_analysis.match_percentage * SKILLS_WEIGHT +
            experience_analysis.bullet_quality_score * BULLET_QUALITY_WEIGHT +
            ats_analysis.score * ATS_WEIGHT +
            has_experience * EXPERIENCE_WEIGHT
        )

        recommendations = self.generate_recommendations(skills_analysis, experience_analysis, ats_analysis)

        logger.info(
            "Gap analysis complete: overall=%d skills=%d%% bullets=%d ats=%d recommendations=%d",
            overall_score, skills_analysis.match_percentage,
            experience_analysis.bullet_quality_score, ats_analysis.score, len(recommendations)
        )

        return GapAnalysisReport(
            overall_score=overall_score,
            skills_analysis=skills_analysis,
            experience_analysis=experience_analysis,
            ats_score=ats_analysis,
            recommendations=recommendations
        )


def analyze_resume_gap(master_resume: Resume, tailored_resume: Resume, job_description: str) -> GapAnalysisReport:
    return ResumeGapAnalyzer(master_resume, tailored_resume, job_description).analyze()


def format_report_text(report: GapAnalysisReport) -> str:
    """Plain-text rendering of a gap analysis report."""
    skills = report.skills_analysis
    experience = report.experience_analysis
    ats = report.ats_score

    lines = [
        'RESUME GAP ANALYSIS',
        f'Overall Score: {report.overall_score}/100',
        '',
        'SKILLS',
        f'Match: {skills.match_percentage}% ({len(skills.matched_skills)} of {len(skills.required_skills)} matched)',
    ]
    for skill in skills.required_skills:
        line = f'- {skill.name}: {skill.status}'
        if skill.alternatives:
            line += f' (transferable: {", ".join(skill.alternatives)})'
        lines.append(line)

    lines.extend([
        '',
        'EXPERIENCE',
        f'Bullet quality: {experience.bullet_quality_score}/100',
        f'Relevant bullets: {experience.relevant_bullets} of {experience.total_bullets}',
    ])
    for bullet in experience.weak_bullets:
        lines.append(f'- [{bullet.score}] {bullet.description}')
    if experience.missing_keywords:
        lines.append(f'Missing keywords: {", ".join(experience.missing_keywords)}')

    lines.extend(['', 'ATS', f'ATS score: {ats.score}/100'])
    for density in ats.keyword_density:
        lines.append(f'- {density.keyword}: {density.count}x (optimal {density.optimal}x, {density.status})')
    for issue in ats.formatting_issues:
        lines.append(f'- Formatting: {issue}')

    lines.extend(['', 'RECOMMENDATIONS'])
    for rec in report.recommendations:
        lines.append(f'- [{rec.priority.upper()}] {rec.title}: {rec.actionable}')

    return '\n'.join(lines)
