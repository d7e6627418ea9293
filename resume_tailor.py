"""
Resume Tailoring Module
Heuristic tailoring of a master resume to a job description: bullet ranking,
keyword-filtered tailored resumes, generated "ideal" resumes for gap analysis,
tag-based filtering and STAR-style bullet optimization (LLM with heuristic fallback).
"""

import logging
import random
import re
import time
from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

import anthropic
import openai

from keyword_extractor import (
    extract_benefits,
    extract_keywords,
    extract_pay_range,
    extract_responsibilities,
    extract_skills,
)
from resume_models import (
    Contact,
    EducationEntry,
    ExperienceEntry,
    ResponsibilityBullet,
    Resume,
    SkillRecord,
    SkillTag,
)
from skill_taxonomy import (
    DEFAULT_PROFESSIONAL_SKILLS,
    JOB_TYPE_MAPPINGS,
    METRIC_PHRASES,
    RANKING_ACTION_VERBS,
    SCALE_PHRASES,
    SCALE_WORDS,
    STRONG_OPENING_VERBS,
    TAILOR_STOP_WORDS,
    VERB_IMPROVEMENTS,
)

logger = logging.getLogger(__name__)

MIN_BULLETS_PER_JOB = 3
MAX_TAILORED_SKILLS = 15
MAX_JOB_DESCRIPTION_CHARS = 2000
DEFAULT_SUMMARY = 'Experienced professional with a proven track record of delivering results.'
MOCK_SUMMARY = 'Experienced professional with a proven track record of delivering results and driving innovation.'

STAR_SYSTEM_PROMPT = "You are an expert resume writer specializing in the STAR method and ATS optimization."
STAR_PROMPT_TEMPLATE = """Transform the following bullet point to follow STAR method principles while incorporating relevant keywords from the job description:

STAR Method Rules:
- Start with a strong action verb
- Include quantifiable metrics (numbers, %, $)
- Show specific outcomes and impact
- Be concise (1-2 lines max)
- Include relevant ATS keywords from job description

Original Bullet Point: "{bullet}"

Job Description Context: "{job_description}"

Required Skills/Keywords: {keywords}

Transform this bullet point to be more impactful, quantifiable, and ATS-optimized while maintaining authenticity. Focus on achievements rather than just responsibilities.

Return ONLY the optimized bullet point, no quotes or explanations."""

_HAS_NUMBER = re.compile(r'\d+[%$km]?')
_HAS_SCALE = re.compile(r'(serving|processing|managing|handling|supporting)', re.IGNORECASE)


def _tailor_keywords(text: str) -> List[str]:
    return extract_keywords(text, limit=15, min_length=4, stop_words=TAILOR_STOP_WORDS)


def _tag_names(tags: Iterable[SkillTag]) -> List[str]:
    return [tag.name for tag in tags]


@dataclass
class JobBreakdown:
    benefits: List[str]
    pay_range: str
    fit_rating: int
    required_skills: List[str]
    responsibilities: List[str]
    match_summary: str


@dataclass
class TailoringResult:
    job_breakdown: JobBreakdown
    tailored_resume: Resume
    analysis: str
    recommendations: List[str] = field(default_factory=list)
    method: str = 'mock'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def rank_bullets(bullets: List[ResponsibilityBullet], job_description: str) -> List[Tuple[ResponsibilityBullet, int]]:
    """Score bullets by job relevance, best first."""
    job_keywords = [k.lower() for k in _tailor_keywords(job_description)]
    job_skills = [s.lower() for s in extract_skills(job_description)]

    ranked = []
    for bullet in bullets:
        score = 0
        bullet_lower = bullet.description.lower()

        score += 10 * sum(1 for keyword in job_keywords if keyword in bullet_lower)
        score += 15 * sum(1 for skill in job_skills if skill in bullet_lower)

        for tag in _tag_names(bullet.tags):
            tag_lower = tag.lower()
            if tag_lower in job_skills:
                score += 12
            if tag_lower in job_keywords:
                score += 8

        score += 2 * sum(1 for verb in RANKING_ACTION_VERBS if verb in bullet_lower)
        if _HAS_NUMBER.search(bullet.description):
            score += 5
        score += 3 * sum(1 for word in SCALE_WORDS if word in bullet_lower)

        ranked.append((bullet, score))

    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked


def select_responsibilities(all_responsibilities: List[ResponsibilityBullet],
                            matched: List[ResponsibilityBullet]) -> List[ResponsibilityBullet]:
    """Matched bullets, topped up from the rest so each job keeps at least three."""
    if len(all_responsibilities) < MIN_BULLETS_PER_JOB:
        return list(all_responsibilities)
    if len(matched) >= MIN_BULLETS_PER_JOB:
        return list(matched)
    unmatched = [resp for resp in all_responsibilities if not any(resp is m for m in matched)]
    return list(matched) + unmatched[:MIN_BULLETS_PER_JOB - len(matched)]


def _mentions_keyword(text: str, tags: Iterable[SkillTag], keywords: List[str]) -> bool:
    text_lower = text.lower()
    tag_names = [name.lower() for name in _tag_names(tags)]
    for keyword in keywords:
        keyword_lower = keyword.lower()
        if keyword_lower in text_lower or any(keyword_lower in tag for tag in tag_names):
            return True
    return False


def _fit_rating(total_skills: int, matched_skills: int, total_experience: int, matched_experience: int) -> int:
    if total_skills == 0 and total_experience == 0:
        return 3
    skill_match = matched_skills / total_skills if total_skills > 0 else 0.5
    exp_match = matched_experience / total_experience if total_experience > 0 else 0.5
    average_match = skill_match * 0.6 + exp_match * 0.4

    if average_match >= 0.7:
        return 5
    if average_match >= 0.55:
        return 4
    if average_match >= 0.35:
        return 3
    if average_match >= 0.2:
        return 2
    return 1


def tailor_resume_mock(job_description: str, master_resume: Resume) -> TailoringResult:
    """Keyword-driven tailoring of the master resume, used when no AI tailoring is available."""
    keywords = _tailor_keywords(job_description)

    relevant_skills = [
        skill for skill in master_resume.skills
        if _mentions_keyword(skill.name, skill.tags, keywords)
    ][:MAX_TAILORED_SKILLS]

    relevant_experience = []
    for exp in master_resume.experience:
        matched = [resp for resp in exp.responsibilities
                   if _mentions_keyword(resp.description, resp.tags, keywords)]
        selected = select_responsibilities(exp.responsibilities, matched)
        if selected:
            relevant_experience.append(replace(exp, responsibilities=selected))

    matched_skills = len(relevant_skills)
    matched_experience = len(relevant_experience)
    fit_rating = _fit_rating(len(master_resume.skills), matched_skills,
                             len(master_resume.experience), matched_experience)

    if fit_rating >= 4:
        match_summary = (f'Strong match with {matched_skills} relevant skills and '
                         f'{matched_experience} relevant experience areas.')
    else:
        match_summary = (f'Moderate match with {matched_skills} skills and {matched_experience} '
                         f'experience areas that align with the job requirements.')

    tailored = Resume(
        contact=master_resume.contact,
        summary=master_resume.contact.professional_summary or MOCK_SUMMARY,
        skills=relevant_skills,
        experience=relevant_experience,
        education=list(master_resume.education),
        certifications=list(master_resume.certifications),
        projects=list(master_resume.projects),
        volunteer=list(master_resume.volunteer),
    )

    if keywords:
        analysis = (f"Based on the job description, I've identified key requirements including "
                    f"{', '.join(keywords[:5])}. The tailored resume emphasizes relevant experience "
                    f"and skills that match these requirements.")
    else:
        analysis = 'Resume has been structured and formatted.'

    logger.info("Mock tailoring: fit=%d skills=%d experience=%d", fit_rating, matched_skills, matched_experience)

    return TailoringResult(
        job_breakdown=JobBreakdown(
            benefits=extract_benefits(job_description),
            pay_range=extract_pay_range(job_description),
            fit_rating=fit_rating,
            required_skills=extract_skills(job_description),
            responsibilities=extract_responsibilities(job_description, limit=8),
            match_summary=match_summary,
        ),
        tailored_resume=tailored,
        analysis=analysis,
        recommendations=[
            'Consider adding quantifiable achievements to strengthen your impact',
            'Highlight specific examples of projects or initiatives you led',
            'Ensure technical skills align with the job requirements',
            'Add relevant certifications if available',
        ],
        method='mock',
    )


def _ideal_bullet_templates(skills: List[str], keywords: List[str]) -> List[Tuple[str, List[str]]]:
    first = skills[0] if skills else None
    second = skills[1] if len(skills) > 1 else None
    third = skills[2] if len(skills) > 2 else None
    return [
        (f"Architected and deployed enterprise-scale {', '.join(skills[:3]) or 'cloud-native'} applications serving 500K+ active users, "
         f"improving system performance by 45% and reducing infrastructure costs by $2M annually", skills[:3]),
        (f"Led cross-functional team of 8 engineers to deliver {keywords[0] if keywords else 'innovative'} solutions, "
         f"reducing deployment time by 60% through automated CI/CD pipelines and DevOps best practices",
         ['Leadership', 'CI/CD', 'DevOps', 'Team Management']),
        (f"Implemented {second or 'modern'} architecture patterns and microservices, achieving 99.9% uptime and "
         f"enabling seamless scaling to handle 10M+ daily transactions",
         ['Architecture', 'Microservices', 'Scalability', 'Performance']),
        (f"Designed and built scalable {first or 'web'} applications processing 1M+ transactions daily with 99.99% "
         f"reliability and sub-200ms response times", [first or 'Development', 'Scalability', 'Performance']),
        ("Optimized database queries and implemented caching strategies, reducing API response time from 2s to 200ms "
         "(90% improvement) and cutting database load by 65%",
         ['Performance Optimization', 'Database', 'Caching', 'API Development']),
        (f"Developed and maintained {first or 'web'} applications using {' and '.join(skills[:2]) or 'modern frameworks'}, implementing "
         f"responsive design and optimal user experience across web and mobile platforms",
         ['Full Stack Development', 'UI/UX', 'Cross-Platform']),
        (f"Built and deployed {second or 'modern'} applications serving 50K+ users, focusing on clean code "
         f"principles and maintainable architecture", ['Development', 'Code Quality', 'Architecture']),
        ("Created automated testing frameworks and CI/CD pipelines, reducing deployment time by 70% and increasing "
         "code quality metrics by 40%", ['Testing', 'CI/CD', 'Automation', 'Quality Assurance']),
        (f"Implemented {keywords[1] if len(keywords) > 1 else 'modern'} design patterns and best practices, improving "
         f"code maintainability and reducing technical debt by 30%", ['Design Patterns', 'Code Quality', 'Best Practices']),
        ("Mentored 5 junior developers and established code review standards, increasing team velocity by 40% and "
         "reducing production bugs by 55%", ['Mentorship', 'Best Practices', 'Code Review', 'Quality Assurance']),
        ("Led technical interviews and hiring processes, building a high-performing engineering team of 12 developers "
         "across multiple time zones", ['Leadership', 'Hiring', 'Team Building', 'Management']),
        ("Collaborated with product managers and designers to deliver features used by 250K+ customers, increasing "
         "user engagement by 35% and retention by 28%", ['Collaboration', 'Product Development', 'User Experience']),
        ("Participated in agile development sprints, consistently delivering 95% of sprint commitments on time while "
         "maintaining 85%+ test coverage", ['Agile', 'Scrum', 'Testing', 'Sprint Planning']),
        ("Established DevOps practices and monitoring systems, reducing mean time to recovery by 60% and improving "
         "system observability", ['DevOps', 'Monitoring', 'Observability', 'Incident Response']),
        ("Contributed to open-source projects and technical communities, sharing knowledge through blog posts and "
         "conference presentations", ['Open Source', 'Community', 'Knowledge Sharing', 'Public Speaking']),
        ("Identified and resolved critical performance bottlenecks in legacy systems, improving response times by 80% "
         "and reducing server costs by $500K annually",
         ['Problem Solving', 'Performance', 'Cost Optimization', 'Legacy Systems']),
        (f"Researched and implemented emerging technologies including {third or 'cloud-native'} solutions, staying "
         f"ahead of industry trends and best practices", ['Research', 'Innovation', 'Emerging Technologies', 'Cloud']),
        ("Troubleshot complex production issues and implemented preventive measures, reducing system downtime by 90% "
         "and improving reliability", ['Troubleshooting', 'Production Support', 'Reliability', 'Incident Management']),
    ]


def generate_ideal_resume(job_description: str) -> Resume:
    """Build a resume that matches the job description as closely as the templates allow."""
    keywords = _tailor_keywords(job_description)
    skills = extract_skills(job_description)

    skill_names = list(skills)
    if len(skill_names) < 15:
        existing = {name.lower() for name in skill_names}
        skill_names.extend(name for name in DEFAULT_PROFESSIONAL_SKILLS if name.lower() not in existing)
    ideal_skills = [SkillRecord(name=name, tags=[SkillTag(name=name)]) for name in skill_names]

    bullets = [
        ResponsibilityBullet(description=description, tags=[SkillTag(name=t) for t in tags if t])
        for description, tags in _ideal_bullet_templates(skills, keywords)
    ]
    ranked = [bullet for bullet, _ in rank_bullets(bullets, job_description)]

    primary_skill = skills[0] if skills else 'Software'
    experience = [
        ExperienceEntry(role=f'Senior {primary_skill} Engineer', company='Tech Innovation Corp',
                        start_date='2020-01-01', responsibilities=ranked[0:4]),
        ExperienceEntry(role=f'{primary_skill} Engineer', company='Digital Solutions Inc',
                        start_date='2017-06-01', end_date='2019-12-31', responsibilities=ranked[4:7]),
        ExperienceEntry(role='Software Developer', company='StartUp Ventures',
                        start_date='2015-01-01', end_date='2017-05-31', responsibilities=ranked[7:10]),
    ]

    summary = (f"Highly accomplished {primary_skill} professional with 10+ years of experience delivering "
               f"enterprise-scale solutions. Expert in {', '.join(skills[:5]) or 'modern software development'} with proven track record of "
               f"improving system performance, leading high-performing teams, and driving business outcomes "
               f"through technical excellence.")

    return Resume(
        contact=Contact(
            name='Ideal Candidate',
            email='ideal.candidate@example.com',
            phone='555-0100',
            location='Remote, USA',
            linkedin='linkedin.com/in/ideal-candidate',
            github='github.com/ideal-candidate',
            professional_summary=summary,
        ),
        summary=summary,
        skills=ideal_skills,
        experience=experience,
        education=[EducationEntry(degree='Bachelor of Science in Computer Science', school='State University',
                                  start_date='2011-09-01', end_date='2015-05-01')],
    )


def tags_for_job_type(job_type: str) -> List[str]:
    """Tag list for a predefined job type, case-insensitive; empty if unknown."""
    for name, (_, tags) in JOB_TYPE_MAPPINGS.items():
        if name.lower() == (job_type or '').strip().lower():
            return list(tags)
    return []


def generate_tag_based_resume(master_resume: Resume, selected_tags: Optional[List[str]]) -> Resume:
    """Filter the master resume down to entries tagged with any of the selected tags."""
    summary = master_resume.contact.professional_summary or DEFAULT_SUMMARY
    if not selected_tags:
        return replace(master_resume, summary=summary)

    selected = set(selected_tags)

    def has_selected_tag(tags: List[SkillTag]) -> bool:
        return any(tag.name in selected for tag in tags)

    experience = []
    for exp in master_resume.experience:
        matched = [resp for resp in exp.responsibilities if has_selected_tag(resp.tags)]
        chosen = select_responsibilities(exp.responsibilities, matched)
        if chosen:
            experience.append(replace(exp, responsibilities=chosen))

    return Resume(
        contact=master_resume.contact,
        summary=summary,
        skills=[skill for skill in master_resume.skills if has_selected_tag(skill.tags)],
        experience=experience,
        education=list(master_resume.education),
        certifications=list(master_resume.certifications),
        projects=[proj for proj in master_resume.projects if has_selected_tag(proj.tags)],
        volunteer=[vol for vol in master_resume.volunteer if has_selected_tag(vol.tags)],
    )


def optimize_bullet_mock(bullet: str, job_description: str, rng: Optional[random.Random] = None) -> str:
    """Rule-based STAR rewrite of a bullet point."""
    rng = rng or random.Random()
    stripped = bullet.strip()
    ends_with_period = stripped.endswith('.')
    optimized = stripped.rstrip('.')
    keywords = extract_skills(job_description)

    for weak, strong in VERB_IMPROVEMENTS.items():
        optimized = re.sub(rf'\b{re.escape(weak)}\b', strong, optimized, flags=re.IGNORECASE)

    if not _HAS_NUMBER.search(optimized):
        optimized += f', improving efficiency {rng.choice(METRIC_PHRASES)}'

    if not _HAS_SCALE.search(optimized):
        optimized += f', {rng.choice(SCALE_PHRASES)}'

    if keywords:
        keyword = rng.choice(keywords)
        if keyword.lower() not in optimized.lower():
            optimized += f' using {keyword}'

    first_word = optimized.split(' ')[0] if optimized else ''
    if not any(verb.lower() in first_word.lower() for verb in STRONG_OPENING_VERBS):
        optimized = f'Developed {optimized[:1].lower()}{optimized[1:]}'

    optimized = optimized[:1].upper() + optimized[1:]
    return optimized + '.' if ends_with_period else optimized


class BulletOptimizer:
    """Optimizes bullet points with an LLM, falling back to the rule-based rewrite"""

    MAX_RETRIES = 2
    BACKOFF_SECONDS = 0.5

    def __init__(self, use_llm: bool = False, llm_api_key: Optional[str] = None,
                 llm_provider: str = 'openai', rng: Optional[random.Random] = None, sleep=time.sleep):
        self.use_llm = use_llm
        self.llm_api_key = llm_api_key
        self.llm_provider = (llm_provider or 'openai').lower()
        self.rng = rng
        self._sleep = sleep

    @property
    def llm_available(self) -> bool:
        return bool(self.use_llm and self.llm_api_key and self.llm_provider in ('openai', 'perplexity', 'anthropic'))

    def _call_llm(self, prompt: str, system_prompt: str, max_tokens: int = 300) -> Optional[str]:
        """Call the configured LLM provider; SDK errors propagate to the caller."""
        if self.llm_provider == 'anthropic':
            client = anthropic.Anthropic(api_key=self.llm_api_key)
            response = client.messages.create(
                model="claude-3-haiku-20240307",
                system=system_prompt,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=0.7
            )
            if not response.content:
                return None
            text = getattr(response.content[0], 'text', None)
            return (text or '').strip() or None

        if self.llm_provider == 'perplexity':
            client = openai.OpenAI(api_key=self.llm_api_key, base_url="https://api.perplexity.ai")
            model = "sonar-pro"
        else:
            client = openai.OpenAI(api_key=self.llm_api_key)
            model = "gpt-4o-mini"

        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt}
            ],
            max_tokens=max_tokens,
            temperature=0.7
        )
        if not response.choices:
            return None
        # content is None for refusals and tool-call responses
        content = response.choices[0].message.content
        return (content or '').strip() or None

    def optimize(self, bullet: str, job_description: str) -> Dict[str, str]:
        """Return {'optimized_text', 'method'} where method is 'ai' or 'mock'."""
        if len(job_description) > MAX_JOB_DESCRIPTION_CHARS:
            job_description = job_description[:MAX_JOB_DESCRIPTION_CHARS] + '...'

        if self.llm_available:
            prompt = STAR_PROMPT_TEMPLATE.format(
                bullet=bullet,
                job_description=job_description,
                keywords=', '.join(extract_skills(job_description)),
            )
            for attempt in range(1, self.MAX_RETRIES + 1):
                try:
                    optimized = self._call_llm(prompt, STAR_SYSTEM_PROMPT)
                    if optimized:
                        return {'optimized_text': optimized.strip('"'), 'method': 'ai'}
                    logger.warning("Empty LLM response on attempt %d/%d", attempt, self.MAX_RETRIES)
                except (openai.OpenAIError, anthropic.AnthropicError) as e:
                    logger.warning("LLM error on attempt %d/%d: %s", attempt, self.MAX_RETRIES, e)
                if attempt < self.MAX_RETRIES:
                    self._sleep(self.BACKOFF_SECONDS * attempt)

        return {'optimized_text': optimize_bullet_mock(bullet, job_description, self.rng), 'method': 'mock'}
