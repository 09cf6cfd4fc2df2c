"""Business-logic services bridging the API layer and the engines."""
