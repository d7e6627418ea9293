import pytest

from resume_models import Resume


JOB_DESCRIPTION = """Senior Python Engineer

We are looking for an engineer with Python, AWS, Docker and Kubernetes experience.

Responsibilities:
- Design and build scalable backend services in Python
- Deploy containerized applications with Docker and Kubernetes on AWS
- Collaborate with product teams to deliver customer features

Salary: $140,000 - $170,000 per year. Health insurance, 401k and remote work.
"""


def master_resume_data():
    return {
        "contact": {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0101",
            "location": "Austin, TX",
            "professional_summary": "Backend engineer with eight years of experience building cloud services.",
        },
        "skills": [
            {"name": "Python", "tags": ["Backend"]},
            {"name": "AWS", "tags": [{"name": "Cloud"}]},
            {"name": "Docker", "tags": ["DevOps"]},
            {"name": "React", "tags": ["Frontend"]},
            {"name": "PostgreSQL", "tags": ["Database"]},
        ],
        "experience": [
            {
                "role": "Senior Software Engineer",
                "company": "Acme",
                "start_date": "2020-01-01",
                "responsibilities": [
                    {"description": "Led migration of 12 microservices to Kubernetes, reducing latency by 40% "
                                    "and saving $200K annually",
                     "tags": ["Kubernetes", "Leadership"]},
                    {"description": "Built REST API endpoints in Python serving 2 million requests daily for "
                                    "enterprise clients",
                     "tags": ["Python", "API Development"]},
                    {"description": "Worked on internal tools.", "tags": []},
                    {"description": "Designed data pipelines on AWS that improved reporting speed by 3x for "
                                    "finance teams",
                     "tags": ["AWS"]},
                ],
            },
            {
                "role": "Developer",
                "company": "Beta",
                "start_date": "2016-06-01",
                "end_date": "2019-12-31",
                "responsibilities": [
                    {"description": "Created React dashboards used by 500 internal users", "tags": ["React"]},
                    {"description": "Helped with database maintenance tasks", "tags": ["Database"]},
                ],
            },
        ],
        "education": [{"degree": "BS Computer Science", "school": "State University", "end_date": "2016-05-01"}],
        "projects": [{"title": "Homelab", "description": "Kubernetes cluster at home", "tags": ["Kubernetes"]}],
        "volunteer": [{"role": "Mentor", "description": "Teaching kids to code", "tags": ["Mentorship"]}],
    }


@pytest.fixture
def job_description():
    return JOB_DESCRIPTION


@pytest.fixture
def master_data():
    return master_resume_data()


@pytest.fixture
def master_resume():
    return Resume.from_dict(master_resume_data())
