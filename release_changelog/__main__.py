import sys

from release_changelog.agents.changelog_agent import main

if __name__ == "__main__":
	sys.exit(main())
