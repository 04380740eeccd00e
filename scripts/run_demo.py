"""
Serve the ServiceMatch API for local testing.

Usage:
    python scripts/run_demo.py [--host HOST] [--port PORT] [--no-reload]
"""

import argparse

import uvicorn

ENDPOINTS = (
    ("GET", "/api/questions", "list the question bank"),
    ("POST", "/api/session/start", "open a questionnaire session"),
    ("POST", "/api/session/{id}/answer", "answer the current question"),
    ("POST", "/api/session/{id}/next", "advance (completes after the last question)"),
    ("GET", "/api/session/{id}/result", "ranked services and cards"),
    ("GET", "/api/session/{id}/chart", "Plotly JSON of the match percentages"),
)


def main():
    parser = argparse.ArgumentParser(description="Run the ServiceMatch API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args()

    base = f"http://{args.host}:{args.port}"
    print(f"ServiceMatch questionnaire API on {base} (docs at {base}/docs)")
    for method, path, purpose in ENDPOINTS:
        print(f"  {method:<5} {path:<28} {purpose}")

    uvicorn.run(
        "servicematch.api.app:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
    )


if __name__ == "__main__":
    main()
