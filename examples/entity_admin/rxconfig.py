"""Reflex configuration for the entity admin demo app."""

import reflex as rx

config = rx.Config(
    app_name="entity_admin",
    plugins=[rx.plugins.SitemapPlugin()],
)
