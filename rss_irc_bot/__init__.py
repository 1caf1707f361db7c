"""RSS IRC Bot: announces new RSS/Atom feed items in an IRC channel."""
