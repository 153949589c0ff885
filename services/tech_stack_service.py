"""Infers a company's technology stack from its job postings."""

from collections import Counter
from typing import Dict, List

from schemas.brief import JobSignal, TechStackItem

TECH_KEYWORDS = [
    "React", "Node.js", "Python", "JavaScript", "TypeScript", "AWS", "Docker",
    "Kubernetes", "PostgreSQL", "MongoDB", "Redis", "GraphQL", "REST API",
    "Microservices", "CI/CD", "Git", "Jenkins", "Terraform", "Vue.js", "Angular",
]

TECH_CATEGORIES: Dict[str, str] = {
    "React": "Frontend",
    "Vue.js": "Frontend",
    "Angular": "Frontend",
    "Node.js": "Backend",
    "Python": "Backend",
    "JavaScript": "Language",
    "TypeScript": "Language",
    "AWS": "Cloud",
    "Docker": "DevOps",
    "Kubernetes": "DevOps",
    "PostgreSQL": "Database",
    "MongoDB": "Database",
    "Redis": "Database",
}

MAX_TECHNOLOGIES = 10
TECH_SOURCE = "Job Analysis"


def category_for(tech: str) -> str:
    return TECH_CATEGORIES.get(tech, "Other")


def confidence_for(count: int) -> str:
    """More than two mentions is High, exactly two Medium, otherwise Low."""
    if count > 2:
        return "High"
    if count == 2:
        return "Medium"
    return "Low"


def count_technologies(jobs: List[JobSignal]) -> Counter:
    """Number of postings mentioning each vocabulary term (case-insensitive substring)."""
    counts: Counter = Counter()
    for job in jobs:
        text = f"{job.title} {job.description}".lower()
        for tech in TECH_KEYWORDS:
            if tech.lower() in text:
                counts[tech] += 1
    return counts


def infer_tech_stack(jobs: List[JobSignal], detected_at: str) -> List[TechStackItem]:
    """
    Rank the vocabulary terms found in the job postings.

    Args:
        jobs: Job postings to scan
        detected_at: Timestamp recorded as ``firstDetected`` on every item

    Returns:
        Up to ten items, most mentioned first; ties keep vocabulary order
    """
    counts = count_technologies(jobs)
    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], TECH_KEYWORDS.index(pair[0])))

    return [
        TechStackItem(
            name=name,
            confidence=confidence_for(count),
            source=TECH_SOURCE,
            category=category_for(name),
            first_detected=detected_at,
        )
        for name, count in ranked[:MAX_TECHNOLOGIES]
    ]
