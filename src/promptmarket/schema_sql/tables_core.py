"""CREATE TABLE statements for users and categories."""

USERS = """
CREATE TABLE users (
    id              SERIAL PRIMARY KEY,
    username        VARCHAR(50)  NOT NULL UNIQUE,
    email           VARCHAR(320) NOT NULL UNIQUE,
    password_hash   VARCHAR(255) NOT NULL,
    avatar          VARCHAR(500),
    created_at      TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

CATEGORIES = """
CREATE TABLE categories (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(100) NOT NULL,
    slug        VARCHAR(100) NOT NULL UNIQUE,
    icon        VARCHAR(100) NOT NULL,
    description TEXT
);
"""

ALL = [USERS, CATEGORIES]
