"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services avoid SQL strings.
The MiniTwit schema is owned by the web application; nothing here creates tables.
"""
