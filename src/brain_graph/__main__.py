"""Allow ``python -m brain_graph``."""
from brain_graph.main import main

if __name__ == "__main__":
    main()
