"""
Live face detection service: capture, detect, render.
Entry point: services.face_monitor.main:main
"""
