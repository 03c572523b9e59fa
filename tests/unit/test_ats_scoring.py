import pytest

from resume_screening import calculate_ats_score, job_description_terms

STRONG_RESUME = "\n".join(
    [
        "Jane Smith",
        "jane.smith@example.com | +91 98765 43210 | linkedin.com/in/janesmith",
        "",
        "Summary",
        "Backend engineer with six years building Python and Django services on AWS.",
        "",
        "Experience",
        "Senior Engineer, Acme Corp",
        "- Led a team of 6 engineers to rebuild the payments API, cutting latency by 45%.",
        "- Designed and implemented an event pipeline serving 2000000 users with Docker and Kubernetes.",
        "- Reduced infrastructure spend by $200,000 and improved uptime by 30%.",
        "- Mentored new hires, delivered quarterly roadmaps and launched a PostgreSQL migration.",
        "- Automated release checks, optimized SQL queries and resolved long-standing incidents.",
        "",
        "Education",
        "B.Tech in Computer Science, National Institute of Technology",
        "",
        "Skills",
        "Python, Django, AWS, Docker, Kubernetes, SQL, PostgreSQL, Git, Agile, Leadership",
        "",
        " ".join(["Maintained clear documentation and runbooks for every production service."] * 12),
    ]
)

JOB_DESCRIPTION = (
    "We need a Python engineer experienced with Django, PostgreSQL, Kubernetes and "
    "Terraform for cloud infrastructure."
)


def _titles(result):
    return [issue.title for issue in result.issues]


def test_minimal_resume_scenario():
    result = calculate_ats_score("John Doe. Experience: none.", "")
    assert result.overall_score < 50
    assert result.overall_score == 36
    assert (result.breakdown.keywords, result.breakdown.impact) == (10, 10)
    assert (result.breakdown.formatting, result.breakdown.completeness) == (10, 6)
    email = [i for i in result.issues if i.title == "Missing Email"]
    assert email and email[0].severity == "critical"
    assert len(result.issues) == 5
    assert _titles(result)[:2] == ["Missing Sections", "Missing Email"]


def test_missing_sections_lists_each_absent_section():
    result = calculate_ats_score("John Doe. Experience: none.", "")
    sections = next(i for i in result.issues if i.title == "Missing Sections")
    assert sections.description == "Missing: Contact Info, Education, Skills"
    assert sections.severity == "critical"


def test_single_missing_section_is_a_warning():
    text = STRONG_RESUME.replace("Education", "Studies").replace("B.Tech in Computer Science, National Institute of Technology", "Self taught")
    result = calculate_ats_score(text)
    sections = next(i for i in result.issues if i.title == "Missing Sections")
    assert sections.severity == "warning"
    assert sections.description == "Missing: Education"


def test_strong_resume_scores_full_marks():
    result = calculate_ats_score(STRONG_RESUME)
    assert result.breakdown.keywords == 30
    assert result.breakdown.impact == 30
    assert result.breakdown.formatting == 20
    assert result.breakdown.completeness == 20
    assert result.overall_score == 100
    assert result.issues == ()


def test_job_description_terms():
    assert job_description_terms(JOB_DESCRIPTION) == [
        "need",
        "python",
        "engineer",
        "experienced",
        "with",
        "django",
        "postgresql",
        "kubernetes",
        "terraform",
        "cloud",
        "infrastructure",
    ]


def test_low_job_description_match_is_critical():
    result = calculate_ats_score("Python developer. Email: dev@example.com", JOB_DESCRIPTION)
    assert result.breakdown.keywords == 2
    low = next(i for i in result.issues if i.title == "Low Keyword Match")
    assert low.severity == "critical"
    assert "terraform" in low.highlight


def test_job_description_words_match_literally():
    jd = "Seeking engineers with 2024 roadmap ownership and testing experience across teams."
    assert job_description_terms(jd) == [
        "seeking", "engineers", "with", "2024", "roadmap", "ownership", "testing", "experience", "across", "teams",
    ]
    resume = "Engineers with 2024 roadmapping, ownership, retesting, experiences across teams. dev@example.com"
    result = calculate_ats_score(resume, jd)
    assert result.breakdown.keywords == 27


def test_full_job_description_match():
    resume = STRONG_RESUME + "\nNeed-driven, experienced with Terraform across cloud infrastructure."
    result = calculate_ats_score(resume, JOB_DESCRIPTION)
    assert result.breakdown.keywords == 30
    assert "Low Keyword Match" not in _titles(result)


def test_short_job_description_uses_common_skills():
    result = calculate_ats_score("Skills: python, sql, docker", "Python role")
    assert result.breakdown.keywords == 16
    assert any("skills" in r.lower() for r in result.recommendations)


def test_placeholder_garbage_is_flagged():
    result = calculate_ats_score(STRONG_RESUME + "\n$$$ ???")
    assert result.breakdown.formatting == 17
    garbage = next(i for i in result.issues if i.title == "Unreadable Characters")
    assert garbage.severity == "info"


def test_long_resume_only_gets_a_recommendation():
    result = calculate_ats_score(STRONG_RESUME + "\n" + " ".join(["detail"] * 1000))
    assert result.breakdown.formatting == 18
    assert "Resume Too Short" not in _titles(result)
    assert any("condensing" in r for r in result.recommendations)


@pytest.mark.parametrize(
    "text, jd",
    [
        ("", ""),
        ("@" * 10, ""),
        ("$$$" * 500, "x" * 60),
        (STRONG_RESUME * 5, JOB_DESCRIPTION),
        ("経験 学歴 スキル", ""),
        ("python " * 3000, "python " * 20),
    ],
)
def test_breakdown_bounds_and_sum(text, jd):
    result = calculate_ats_score(text, jd)
    b = result.breakdown
    assert 0 <= b.keywords <= 30
    assert 0 <= b.impact <= 30
    assert 0 <= b.formatting <= 20
    assert 0 <= b.completeness <= 20
    assert result.overall_score == b.keywords + b.impact + b.formatting + b.completeness
    assert len(result.issues) <= 5
    assert len(result.recommendations) <= 5
