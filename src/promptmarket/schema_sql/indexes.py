"""All CREATE INDEX statements for the initial schema."""

ALL = [
    # prompts
    "CREATE INDEX idx_prompts_newest ON prompts(created_at DESC, id DESC);",
    "CREATE INDEX idx_prompts_category ON prompts(category_id, created_at DESC);",
    "CREATE INDEX idx_prompts_author ON prompts(author_id, created_at DESC);",
    "CREATE INDEX idx_prompts_featured ON prompts(created_at DESC) WHERE featured = TRUE;",
    "CREATE INDEX idx_prompts_trending ON prompts(created_at DESC) WHERE trending = TRUE;",
    # reviews
    "CREATE INDEX idx_reviews_prompt ON reviews(prompt_id, id);",
    # favorites / cart_items (the unique constraints already cover user_id lookups)
    "CREATE INDEX idx_favorites_prompt ON favorites(prompt_id);",
    "CREATE INDEX idx_cart_items_prompt ON cart_items(prompt_id);",
    # purchases
    "CREATE INDEX idx_purchases_user ON purchases(user_id, created_at DESC);",
]
