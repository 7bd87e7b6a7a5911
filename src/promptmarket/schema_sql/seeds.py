"""Seed data INSERT statements for static reference data."""

CATEGORIES = """
INSERT INTO categories (name, slug, icon, description)
VALUES
    ('Writing',      'writing',    'fas fa-pen-fancy',      'Creative writing and content prompts'),
    ('Art & Design', 'art-design', 'fas fa-palette',        'Visual art and design prompts'),
    ('Coding',       'coding',     'fas fa-code',           'Programming and development prompts'),
    ('Business',     'business',   'fas fa-chart-line',     'Business and marketing prompts'),
    ('Education',    'education',  'fas fa-graduation-cap', 'Educational and learning prompts'),
    ('Gaming',       'gaming',     'fas fa-gamepad',        'Game development and gaming prompts');
"""

ALL = [CATEGORIES]
