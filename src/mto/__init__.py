"""Media Transcode Orchestrator.

Probes an uploaded file, transcodes it for a named style with ffmpeg, and
records source and output metadata per style on the attachment.
"""

__version__ = "0.1.0"
