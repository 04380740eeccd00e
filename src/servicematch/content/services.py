"""
Service descriptions shown on recommendation cards.

One profile per category. The engine never builds booking links; callers
use `call_to_action` to pick one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.ranking import RecommendationResult


@dataclass
class ServiceProfile:
    """Presentation data for one recommendation category."""
    category: str
    title: str
    description: str
    recommendations: List[str] = field(default_factory=list)
    call_to_action: str = "consultation"

    def to_dict(self) -> Dict:
        return {
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "recommendations": list(self.recommendations),
            "call_to_action": self.call_to_action,
        }


SERVICE_PROFILES: Dict[str, ServiceProfile] = {
    "web": ServiceProfile(
        category="web",
        title="Full-Stack Web Development",
        description="Perfect for comprehensive web applications with modern frameworks.",
        recommendations=[
            "Next.js with TypeScript for robust development",
            "Tailwind CSS for responsive design",
            "MongoDB or PostgreSQL for data storage",
            "Deployment on Vercel or AWS",
        ],
        call_to_action="web_project_call",
    ),
    "photo": ServiceProfile(
        category="photo",
        title="Photography",
        description="Brand, product and event photography with a consistent visual style.",
        recommendations=[
            "Pre-shoot planning call and shot list",
            "Studio or on-location session",
            "Color-graded, web-optimized deliverables",
        ],
        call_to_action="photo_shoot_call",
    ),
    "cinema": ServiceProfile(
        category="cinema",
        title="Video & Cinematography",
        description="Promotional films, reels and event coverage from script to final cut.",
        recommendations=[
            "Storyboard and script development",
            "Cinema camera and aerial footage",
            "Editing, color grading and sound design",
        ],
        call_to_action="video_project_call",
    ),
    "automation": ServiceProfile(
        category="automation",
        title="Automation & Workflow Solutions",
        description="Great for streamlining business processes and workflows.",
        recommendations=[
            "n8n workflow automation",
            "API integrations and webhooks",
            "Custom automation tools",
            "Process optimization consulting",
        ],
        call_to_action="automation_call",
    ),
    "ai": ServiceProfile(
        category="ai",
        title="AI Solutions",
        description="Assistants and content tools built on your own data.",
        recommendations=[
            "Use-case discovery workshop",
            "Retrieval over your documents and tickets",
            "Evaluation and rollout plan",
        ],
        call_to_action="ai_discovery_call",
    ),
    "tech": ServiceProfile(
        category="tech",
        title="Technical Consultation",
        description="Ideal for teams needing guidance and architecture planning.",
        recommendations=[
            "Architecture review and planning",
            "Technology stack recommendations",
            "Code review and best practices",
            "Performance optimization strategies",
        ],
    ),
}


def get_service_profile(category: str) -> Optional[ServiceProfile]:
    return SERVICE_PROFILES.get(category)


def get_service_cards(result: RecommendationResult) -> List[Dict]:
    """
    Cards for the detailed entries of a result, in ranked order.

    A fallback result gets a single card for its primary category.
    """
    if result.is_fallback:
        profile = get_service_profile(result.primary_category)
        return [dict(profile.to_dict(), percentage=None)] if profile else []

    cards = []
    for entry in result.detailed_entries:
        profile = get_service_profile(entry.category)
        if profile is None:
            continue
        cards.append(dict(profile.to_dict(), percentage=entry.percentage))
    return cards
