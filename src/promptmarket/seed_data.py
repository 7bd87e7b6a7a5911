"""Demo catalog: categories, sellers, and one prompt per category."""

from __future__ import annotations

from decimal import Decimal

import structlog

from promptmarket.services.auth_service import hash_password
from promptmarket.store.base import EntityStore

log = structlog.get_logger()

DEMO_PASSWORD = "password123"

CATEGORIES = [
    {"name": "Writing", "slug": "writing", "icon": "fas fa-pen-fancy",
     "description": "Creative writing and content prompts"},
    {"name": "Art & Design", "slug": "art-design", "icon": "fas fa-palette",
     "description": "Visual art and design prompts"},
    {"name": "Coding", "slug": "coding", "icon": "fas fa-code",
     "description": "Programming and development prompts"},
    {"name": "Business", "slug": "business", "icon": "fas fa-chart-line",
     "description": "Business and marketing prompts"},
    {"name": "Education", "slug": "education", "icon": "fas fa-graduation-cap",
     "description": "Educational and learning prompts"},
    {"name": "Gaming", "slug": "gaming", "icon": "fas fa-gamepad",
     "description": "Game development and gaming prompts"},
]

USERS = [
    {"username": "sarah_chen", "email": "sarah@example.com"},
    {"username": "alex_rivera", "email": "alex@example.com"},
    {"username": "mike_johnson", "email": "mike@example.com"},
]

_IMG = "https://images.unsplash.com/{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=250"

# category / author are indexes into CATEGORIES / USERS
PROMPTS = [
    {
        "title": "Master Blog Writer - SEO Optimized Content",
        "description": "Create engaging, SEO-optimized blog posts that rank high on Google. "
                       "Perfect for content marketers and bloggers.",
        "content": "Write a comprehensive blog post about [TOPIC] that is optimized for SEO. "
                   "Include relevant keywords, engaging headlines, and actionable content "
                   "that provides value to readers...",
        "price": "12.99", "category": 0, "author": 0, "rating": "4.9", "sales_count": 847,
        "featured": True, "trending": False, "is_new": False,
        "tags": ["SEO", "Content Marketing", "Blogging"],
        "preview_image": _IMG.format("photo-1611224923853-80b023f02d71"),
    },
    {
        "title": "Midjourney Art Master - Photorealistic Portraits",
        "description": "Generate stunning photorealistic portraits with perfect lighting and "
                       "composition. Ideal for artists and designers.",
        "content": "Create a photorealistic portrait of [SUBJECT] with professional lighting, "
                   "detailed facial features, and artistic composition...",
        "price": "18.99", "category": 1, "author": 1, "rating": "4.7", "sales_count": 523,
        "featured": True, "trending": True, "is_new": False,
        "tags": ["Midjourney", "Portraits", "Digital Art"],
        "preview_image": _IMG.format("photo-1618005182384-a83a8bd57fbe"),
    },
    {
        "title": "Full-Stack Developer Assistant",
        "description": "Complete coding solutions from frontend to backend. "
                       "Perfect for developers at all levels.",
        "content": "Act as a senior full-stack developer and help create a [PROJECT TYPE] "
                   "application with [TECHNOLOGIES]...",
        "price": "24.99", "category": 2, "author": 2, "rating": "5.0", "sales_count": 291,
        "featured": True, "trending": False, "is_new": True,
        "tags": ["Full-Stack", "Development", "Programming"],
        "preview_image": _IMG.format("photo-1555949963-aa79dcee981c"),
    },
    {
        "title": "Social Media Marketing Guru",
        "description": "Create viral social media content that drives engagement and converts "
                       "followers to customers.",
        "content": "Develop a comprehensive social media strategy for [PLATFORM] focusing on "
                   "[NICHE]. Include content ideas, posting schedule, and engagement tactics...",
        "price": "15.99", "category": 3, "author": 0, "rating": "4.8", "sales_count": 642,
        "featured": False, "trending": True, "is_new": False,
        "tags": ["Social Media", "Marketing", "Engagement"],
        "preview_image": _IMG.format("photo-1611262588024-d12430b98920"),
    },
    {
        "title": "Interactive Learning Designer",
        "description": "Design engaging educational content that makes complex topics easy to "
                       "understand and remember.",
        "content": "Create an interactive learning module about [SUBJECT] that includes visual "
                   "aids, quizzes, and hands-on activities...",
        "price": "19.99", "category": 4, "author": 1, "rating": "4.6", "sales_count": 356,
        "featured": False, "trending": False, "is_new": True,
        "tags": ["Education", "Interactive", "Learning"],
        "preview_image": _IMG.format("photo-1503676260728-1c00da094a0b"),
    },
    {
        "title": "Game Narrative Architect",
        "description": "Craft compelling storylines and character development for immersive "
                       "gaming experiences.",
        "content": "Develop a complete narrative structure for a [GAME GENRE] game including "
                   "main story arc, character backstories, and dialogue systems...",
        "price": "22.99", "category": 5, "author": 2, "rating": "4.9", "sales_count": 189,
        "featured": False, "trending": True, "is_new": True,
        "tags": ["Game Design", "Storytelling", "Characters"],
        "preview_image": _IMG.format("photo-1538481199705-c710c4e965fc"),
    },
]


async def _get_or_create_category(store: EntityStore, data: dict):
    existing = await store.get_category_by_slug(data["slug"])
    if existing is not None:
        return existing
    return await store.create_category(**data)


async def seed_store(store: EntityStore) -> bool:
    """Insert the demo catalog unless prompts already exist.

    Categories already present (the migration inserts them) are reused by
    slug.  Returns True when data was inserted.  Does not commit.
    """
    if await store.count_prompts() > 0:
        log.info("seed_skipped", reason="prompts_present")
        return False

    categories = [await _get_or_create_category(store, data) for data in CATEGORIES]

    password_hash = hash_password(DEMO_PASSWORD)
    users = [
        await store.create_user(password_hash=password_hash, **data) for data in USERS
    ]

    for data in PROMPTS:
        fields = dict(data)
        category = categories[fields.pop("category")]
        author = users[fields.pop("author")]
        await store.create_prompt(
            category_id=category.id,
            author_id=author.id,
            price=Decimal(fields.pop("price")),
            rating=Decimal(fields.pop("rating")),
            **fields,
        )

    log.info(
        "seed_completed",
        categories=len(categories),
        users=len(users),
        prompts=len(PROMPTS),
    )
    return True
