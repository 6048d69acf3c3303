"""
Boundary layer.

Persistence for chat sessions, message logs, mood entries and activities.
The generative model clients live with the engines in backend.core.therapy.
"""
