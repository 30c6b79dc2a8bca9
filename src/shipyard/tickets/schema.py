"""Property names of the Shipyard tickets data source."""

TITLE = "Ticket"
STATUS = "Status"
SUMMARY = "Summary"
SPEC_URL = "Spec URL"
DUE = "Due"
BRANCH = "Branch"
COMMIT = "Commit"
FEATURE = "Feature"
RESOLVED_AT = "Resolved At"
AREA = "Area"
APPLICATION = "Application"
TYPE = "Type"
PRIORITY = "Priority"
ASSIGNEE = "Assignee"
DEPENDENCY = "Dependency"
# The remote property name really does end with a space.
BLOCKS = "Blocks "
