"""Data models for containers, posts, insights and batches"""
