"""HTTP routers for interview sessions and resume scoring."""
