"""CREATE TABLE statements for prompts and reviews."""

PROMPTS = """
CREATE TABLE prompts (
    id            SERIAL PRIMARY KEY,
    title         VARCHAR(200) NOT NULL,
    description   TEXT NOT NULL,
    content       TEXT NOT NULL,
    price         NUMERIC(10, 2) NOT NULL
                  CONSTRAINT ck_prompt_price_nonneg CHECK (price >= 0),
    category_id   INTEGER NOT NULL REFERENCES categories(id),
    author_id     INTEGER NOT NULL REFERENCES users(id),
    rating        NUMERIC(3, 2) NOT NULL DEFAULT 0
                  CONSTRAINT ck_prompt_rating_range CHECK (rating >= 0 AND rating <= 5),
    sales_count   INTEGER NOT NULL DEFAULT 0
                  CONSTRAINT ck_prompt_sales_nonneg CHECK (sales_count >= 0),
    featured      BOOLEAN NOT NULL DEFAULT FALSE,
    trending      BOOLEAN NOT NULL DEFAULT FALSE,
    is_new        BOOLEAN NOT NULL DEFAULT TRUE,
    tags          JSONB NOT NULL DEFAULT '[]'::jsonb,
    preview_image VARCHAR(500),
    created_at    TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

REVIEWS = """
CREATE TABLE reviews (
    id          SERIAL PRIMARY KEY,
    prompt_id   INTEGER NOT NULL REFERENCES prompts(id),
    user_id     INTEGER NOT NULL REFERENCES users(id),
    rating      INTEGER NOT NULL
                CONSTRAINT ck_review_rating_range CHECK (rating BETWEEN 1 AND 5),
    comment     TEXT,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

ALL = [PROMPTS, REVIEWS]
