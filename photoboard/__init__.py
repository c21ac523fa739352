"""
Photoboard backend package.

A small FastAPI service for sharing photos: account signup/login, image
upload to an S3-compatible media host, a like/unlike toggle and a
leaderboard of the most liked photos.
"""
