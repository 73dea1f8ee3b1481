"""
Realtime transport, delegated to python-socketio.
"""
