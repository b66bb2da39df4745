"""LAMP student portal client library.

Keep package import lightweight; import heavy submodules explicitly where needed.
"""

__version__ = "1.0.0"
__all__ = [
	"client",
	"auth",
	"config",
	"models",
	"exceptions",
	"correlator",
	"submissions",
	"status",
	"aggregator",
	"coordinator",
	"notifications",
	"events",
	"grouping",
	"schedule",
	"messaging",
]
