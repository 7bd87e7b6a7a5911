"""CREATE TABLE statements for favorites, cart items, and purchases.

The (user_id, prompt_id) unique constraints are what keep favorites and cart
membership at-most-one under concurrent writers.
"""

FAVORITES = """
CREATE TABLE favorites (
    id          SERIAL PRIMARY KEY,
    user_id     INTEGER NOT NULL REFERENCES users(id),
    prompt_id   INTEGER NOT NULL REFERENCES prompts(id),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now(),
    CONSTRAINT uq_favorite_user_prompt UNIQUE (user_id, prompt_id)
);
"""

CART_ITEMS = """
CREATE TABLE cart_items (
    id          SERIAL PRIMARY KEY,
    user_id     INTEGER NOT NULL REFERENCES users(id),
    prompt_id   INTEGER NOT NULL REFERENCES prompts(id),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now(),
    CONSTRAINT uq_cart_item_user_prompt UNIQUE (user_id, prompt_id)
);
"""

PURCHASES = """
CREATE TABLE purchases (
    id          SERIAL PRIMARY KEY,
    user_id     INTEGER NOT NULL REFERENCES users(id),
    prompt_id   INTEGER NOT NULL REFERENCES prompts(id),
    price       NUMERIC(10, 2) NOT NULL
                CONSTRAINT ck_purchase_price_nonneg CHECK (price >= 0),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

ALL = [FAVORITES, CART_ITEMS, PURCHASES]
