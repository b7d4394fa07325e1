"""
Tile Duel - two-player 2048 played peer to peer.
"""
