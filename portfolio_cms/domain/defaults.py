"""
Contenus par défaut par section et par langue.

Utilisés lorsqu'aucun document publié n'existe (lecture publique), comme repli côté client
lorsqu'une section ne peut pas être chargée, et pour l'amorçage optionnel du magasin.
"""

from __future__ import annotations

import copy
from typing import Any

from portfolio_cms.domain.content import GLOBAL_SECTIONS, ITEM_SECTIONS, ContentDocument

_DEFAULTS: dict[str, dict[str, Any]] = {
    "zh": {
        "home": {
            "name": "您的姓名",
            "title": "作品集标题",
            "description": "这里是您的个人简介，描述您的专业背景和特长。",
            "skills": ["技能1", "技能2", "技能3"],
            "highlights": ["亮点1", "亮点2"],
            "socialLinks": {"email": "your@email.com", "github": "", "linkedin": "", "website": ""},
        },
        "profile": {
            "bio": "这里是详细的个人简介。",
            "specialties": ["专业领域1", "专业领域2"],
            "achievements": ["成就1", "成就2"],
            "philosophy": "个人理念",
        },
        "education": {"education": [
            {
                "id": 1,
                "institution": "示例大学",
                "degree": "学位名称",
                "field": "专业领域",
                "startDate": "2020-09",
                "endDate": "2024-06",
                "description": "教育经历描述",
            }
        ]},
        "experience": {"experience": [
            {
                "id": 1,
                "title": "示例经历",
                "description": "工作经历描述",
                "keyPoints": ["要点1", "要点2"],
                "category": "execution",
            }
        ]},
        "projects": [
            {
                "id": 1,
                "title": "示例项目",
                "description": "项目简短描述",
                "category": "群展",
                "tags": ["标签1", "标签2"],
                "images": [],
                "links": [],
                "featured": True,
            }
        ],
        "interests": [
            {
                "id": 1,
                "category": "设计",
                "title": "示例兴趣",
                "description": "兴趣描述",
                "images": [],
                "links": [],
            }
        ],
        "contact": {
            "email": "your@email.com",
            "phone": "+86 123 4567 8900",
            "location": "您的城市",
            "social": {"linkedin": "", "github": "", "behance": ""},
            "message": "欢迎联系我讨论合作机会",
        },
    },
    "en": {
        "home": {
            "name": "Your Name",
            "title": "Portfolio Title",
            "description": "A short introduction to your professional background and expertise.",
            "skills": ["Skill 1", "Skill 2", "Skill 3"],
            "highlights": ["Highlight 1", "Highlight 2"],
            "socialLinks": {"email": "your@email.com", "github": "", "linkedin": "", "website": ""},
        },
        "profile": {
            "bio": "A detailed personal introduction.",
            "specialties": ["Specialty 1", "Specialty 2"],
            "achievements": ["Achievement 1", "Achievement 2"],
            "philosophy": "Personal philosophy",
        },
        "education": {"education": [
            {
                "id": 1,
                "institution": "Example University",
                "degree": "Degree Name",
                "field": "Field of Study",
                "startDate": "2020-09",
                "endDate": "2024-06",
                "description": "Description of educational experience",
            }
        ]},
        "experience": {"experience": [
            {
                "id": 1,
                "title": "Example Experience",
                "description": "Work experience description",
                "keyPoints": ["Point 1", "Point 2"],
                "category": "execution",
            }
        ]},
        "projects": [
            {
                "id": 1,
                "title": "Example Project",
                "description": "Brief project description",
                "category": "Group Exhibition",
                "tags": ["Tag 1", "Tag 2"],
                "images": [],
                "links": [],
                "featured": True,
            }
        ],
        "interests": [
            {
                "id": 1,
                "category": "Design",
                "title": "Example Interest",
                "description": "Interest description",
                "images": [],
                "links": [],
            }
        ],
        "contact": {
            "email": "your@email.com",
            "phone": "+1 123 456 7890",
            "location": "Your City",
            "social": {"linkedin": "", "github": "", "behance": ""},
            "message": "Feel free to contact me to discuss collaboration opportunities",
        },
    },
}

_GLOBAL_DEFAULTS: dict[str, dict[str, Any]] = {
    "theme": {
        "primaryColor": "#030213",
        "accentColor": "#e9ebef",
        "fontFamily": "Inter",
        "darkMode": False,
    },
    "settings/site": {
        "siteTitle": "Portfolio",
        "defaultLanguage": "zh",
        "showDrafts": False,
        "maintenanceMode": False,
    },
}


def default_content(section: str, language: str) -> ContentDocument:
    """Retourne une copie du contenu par défaut (objet vide / tableau vide si inconnu)."""
    if section in GLOBAL_SECTIONS:
        return copy.deepcopy(_GLOBAL_DEFAULTS.get(section, {}))
    doc = _DEFAULTS.get(language, {}).get(section)
    if doc is None:
        return [] if section in ITEM_SECTIONS else {}
    return copy.deepcopy(doc)
