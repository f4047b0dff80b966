"""
Route blueprints: the JSON API (routes.api) and the HTML dashboard (routes.dashboard).
"""
