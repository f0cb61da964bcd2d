# Controllers package initialization
# Blueprints are imported by main.create_app()
