"""
Streaming pipeline: endpoint, decoder, router, pager bridge and session loop.
"""
