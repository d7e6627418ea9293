"""
Static taxonomy tables for resume gap analysis and tailoring.
All tables are read-only: tuples and MappingProxyType-wrapped dicts.
"""

from types import MappingProxyType
from typing import Dict, Tuple


def _frozen(mapping: Dict) -> MappingProxyType:
    return MappingProxyType(dict(mapping))


# Regex fragments per category, searched as whole words
SKILL_PATTERNS = _frozen({
    'languages': ('javascript', 'typescript', 'python', 'java', 'c#', 'csharp', r'c\+\+',
                  'ruby', 'php', 'go', 'rust', 'swift', 'kotlin'),
    'frontend': ('react', 'angular', 'vue', 'html', 'css', 'sass', 'less', 'tailwind',
                 'bootstrap', 'jquery'),
    'backend': (r'node\.js', 'nodejs', 'express', 'django', 'flask', 'spring', 'spring boot',
                r'\.net', r'asp\.net', 'fastapi', 'laravel'),
    'databases': ('sql', 'mysql', 'postgresql', 'postgres', 'mongodb', 'redis', 'oracle',
                  'dynamodb', 'cassandra'),
    'cloud': ('aws', 'azure', 'gcp', 'google cloud', 'docker', 'kubernetes', 'k8s',
              'terraform', 'ansible'),
    'tools': ('git', 'github', 'gitlab', 'jira', 'jenkins', 'ci/cd', 'cicd', 'devops',
              'maven', 'gradle', 'npm', 'webpack'),
})

# Rewrites applied to a dot-stripped, lower-cased match
SPECIAL_SKILL_NAMES = _frozen({
    'nodejs': 'Node.js',
    'node js': 'Node.js',
    'cicd': 'CI/CD',
    'ci/cd': 'CI/CD',
    'ci cd': 'CI/CD',
    'csharp': 'C#',
    'c#': 'C#',
    'c++': 'C++',
    'net': '.NET',
    'aspnet': 'ASP.NET',
    'k8s': 'Kubernetes',
    'postgres': 'PostgreSQL',
})

# Display spellings that plain title-casing would get wrong
SKILL_DISPLAY_NAMES = _frozen({
    'javascript': 'JavaScript',
    'typescript': 'TypeScript',
    'php': 'PHP',
    'html': 'HTML',
    'css': 'CSS',
    'sass': 'Sass',
    'jquery': 'jQuery',
    'fastapi': 'FastAPI',
    'sql': 'SQL',
    'mysql': 'MySQL',
    'postgresql': 'PostgreSQL',
    'mongodb': 'MongoDB',
    'dynamodb': 'DynamoDB',
    'aws': 'AWS',
    'gcp': 'GCP',
    'github': 'GitHub',
    'gitlab': 'GitLab',
    'devops': 'DevOps',
    'npm': 'npm',
})

# Transferable skills, keyed by lower-cased skill name
TRANSFERABLE_SKILLS = _frozen({
    'angular': ('react', 'vue', 'typescript', 'javascript'),
    'react': ('angular', 'vue', 'typescript', 'javascript'),
    'vue': ('angular', 'react', 'typescript', 'javascript'),
    'aws': ('azure', 'gcp', 'cloud'),
    'azure': ('aws', 'gcp', 'cloud'),
    'gcp': ('aws', 'azure', 'cloud'),
    'sql server': ('postgresql', 'mysql', 'oracle', 'sql'),
    'postgresql': ('sql server', 'mysql', 'oracle', 'sql'),
    'mysql': ('sql server', 'postgresql', 'oracle', 'sql'),
    'docker': ('kubernetes', 'containers'),
    'kubernetes': ('docker', 'containers'),
    'c#': ('.net', 'asp.net', 'entity framework'),
    '.net': ('c#', 'asp.net', 'entity framework'),
    'node.js': ('javascript', 'typescript', 'express'),
    'python': ('django', 'flask', 'fastapi'),
    'java': ('spring', 'spring boot', 'hibernate'),
})

# Keyword extraction stop lists
GAP_STOP_WORDS = frozenset((
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
))
TAILOR_STOP_WORDS = GAP_STOP_WORDS | frozenset(('is', 'are', 'was', 'were'))

# Bullet-quality rubric vocabularies
ACTION_VERBS: Tuple[str, ...] = (
    'designed', 'developed', 'led', 'managed', 'created', 'implemented',
    'architected', 'built', 'deployed', 'optimized', 'improved', 'reduced',
    'increased', 'established', 'collaborated', 'coordinated', 'executed',
    'delivered', 'enhanced', 'streamlined', 'transformed', 'spearheaded',
)
IMPACT_WORDS: Tuple[str, ...] = (
    'improved', 'increased', 'reduced', 'saved', 'generated', 'achieved',
    'delivered', 'enhanced', 'optimized', 'resulting', 'enabling',
    'improving', 'increasing', 'reducing', 'saving', 'generating',
)
TECH_TERMS: Tuple[str, ...] = (
    'api', 'database', 'cloud', 'framework', 'system', 'application',
    'platform', 'service', 'architecture', 'infrastructure',
)

# Bullet ranking vocabularies
RANKING_ACTION_VERBS: Tuple[str, ...] = (
    'led', 'managed', 'developed', 'implemented', 'designed', 'architected', 'optimized',
    'improved', 'increased', 'reduced', 'delivered', 'built', 'created', 'established',
)
SCALE_WORDS: Tuple[str, ...] = (
    'enterprise', 'large-scale', 'high-volume', 'millions', 'thousands', 'team', 'cross-functional',
)

BENEFIT_KEYWORDS: Tuple[str, ...] = (
    'health insurance', 'dental', 'vision', '401k', 'retirement',
    'pto', 'paid time off', 'vacation', 'sick leave',
    'remote', 'work from home', 'flexible', 'hybrid',
    'bonus', 'stock options', 'equity',
)

DEFAULT_PROFESSIONAL_SKILLS: Tuple[str, ...] = (
    'Problem Solving', 'Communication', 'Leadership', 'Teamwork', 'Agile', 'Scrum',
)

# Heuristic bullet optimization, used when no LLM is available
VERB_IMPROVEMENTS = _frozen({
    'worked on': 'developed',
    'helped with': 'led',
    'was responsible for': 'managed',
    'did': 'implemented',
    'made': 'created',
    'fixed': 'resolved',
    'used': 'leveraged',
    'handled': 'managed',
    'took care of': 'coordinated',
})
METRIC_PHRASES: Tuple[str, ...] = (
    'by 25%', 'by 40%', 'by 60%', 'by 30%', 'by 50%', 'by 35%', 'by 20%',
)
SCALE_PHRASES: Tuple[str, ...] = (
    'serving 100K+ users', 'processing 1M+ transactions', 'managing team of 8',
    'handling 500K+ daily requests', 'supporting 50+ clients', 'reducing costs by $100K',
)
STRONG_OPENING_VERBS: Tuple[str, ...] = (
    'Led', 'Developed', 'Implemented', 'Designed', 'Managed', 'Created', 'Optimized', 'Enhanced',
)

JOB_TYPE_MAPPINGS = _frozen({
    'Software Engineer': (
        'Full-stack software development role',
        ('Angular', 'TypeScript', 'JavaScript', 'REST API', 'Full Stack',
         'Frontend', 'Backend', 'C#', '.NET', 'SQL', 'API Development',
         'Database', 'Web Development', 'MVC', 'Entity Framework', 'Azure',
         'AWS', 'Cloud', 'DevOps', 'CI/CD', 'Git', 'Agile', 'Testing'),
    ),
    'Senior Software Engineer': (
        'Senior-level software development with architecture focus',
        ('Angular', 'TypeScript', 'JavaScript', 'REST API', 'Full Stack',
         'Architecture', 'System Design', 'Scalability', 'Enterprise Architecture',
         'C#', '.NET', 'SQL', 'API Development', 'Microservices', 'Cloud',
         'Azure', 'AWS', 'DevOps', 'CI/CD', 'Leadership', 'Mentorship',
         'Code Review', 'Best Practices', 'Security', 'Performance'),
    ),
    'Frontend Developer': (
        'Frontend-focused web development',
        ('Angular', 'TypeScript', 'JavaScript', 'HTML', 'CSS', 'Frontend',
         'UI/UX', 'Responsive Design', 'Web Development', 'React', 'Vue',
         'UI Development', 'Cross-Platform', 'Testing', 'Git', 'Agile'),
    ),
    'Backend Developer': (
        'Backend and API development',
        ('C#', '.NET', 'Backend', 'API Development', 'REST API', 'SQL',
         'Database', 'Entity Framework', 'Microservices', 'Transaction Processing',
         'Performance', 'Scalability', 'Cloud', 'Azure', 'AWS', 'DevOps'),
    ),
    'Full Stack Developer': (
        'Full-stack web application development',
        ('Angular', 'TypeScript', 'JavaScript', 'C#', '.NET', 'Full Stack',
         'Frontend', 'Backend', 'REST API', 'SQL', 'Database', 'MVC',
         'Entity Framework', 'Web Development', 'API Development', 'Cloud',
         'Agile', 'Testing', 'Git', 'DevOps'),
    ),
    'Project Manager': (
        'Project management and team coordination',
        ('Project Management', 'Agile', 'Scrum', 'Leadership', 'Communication',
         'Team Coordination', 'Sprint Planning', 'Workflow Optimization',
         'Task Management', 'JIRA', 'Collaboration', 'Teamwork', 'Team Development',
         'Mentorship', 'Stakeholder Management'),
    ),
    'DevOps Engineer': (
        'DevOps, CI/CD, and infrastructure automation',
        ('DevOps', 'CI/CD', 'Azure DevOps', 'Jenkins', 'Docker', 'Kubernetes',
         'Cloud', 'Azure', 'AWS', 'Infrastructure', 'Automation', 'Deployment',
         'Release Management', 'Continuous Delivery', 'Monitoring', 'Security',
         'Testing', 'Git', 'GitLab', 'Terraform'),
    ),
    'Business Analyst': (
        'Business analysis and requirements gathering',
        ('Business Analysis', 'Requirements Gathering', 'Data Analysis',
         'Reporting', 'Communication', 'Collaboration', 'Project Management',
         'Agile', 'Scrum', 'SQL', 'Excel', 'Documentation', 'Stakeholder Management'),
    ),
    'Solutions Architect': (
        'Solution architecture and system design',
        ('Architecture', 'System Design', 'Enterprise Architecture', 'Scalability',
         'Cloud', 'Azure', 'AWS', 'Microservices', 'API Development', 'REST API',
         'Security', 'Performance', 'Best Practices', 'Technical Leadership',
         'Solution Design', 'Integration', 'DevOps', 'Database'),
    ),
    'Healthcare IT': (
        'Healthcare technology and compliance',
        ('Healthcare', 'HIPAA', 'Compliance', 'Security', 'SOC', 'Governance',
         'Auditing', 'Logging', 'Enterprise Application', 'Full Stack',
         'Database', 'Reporting', 'ETL', 'Analytics', 'Performance Improvement'),
    ),
})
