"""Playback configuration and audio output sinks."""