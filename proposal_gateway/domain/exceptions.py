"""Domain-specific exceptions"""

from typing import Dict, List, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ProposalValidationError(DomainException):
    """Proposal data is malformed or violates a structural rule"""

    def __init__(self, issues: List[Dict[str, str]]):
        self.issues = issues
        summary = "; ".join(f"{i['field']}: {i['message']}" for i in issues)
        super().__init__(f"Invalid proposal data: {summary}")


class DuplicateFeeError(ProposalValidationError):
    """A fee with the same name already exists in the list"""

    def __init__(self, field: str, name: str):
        self.name = name
        super().__init__([{"field": field, "message": f"'{name}' already exists"}])


class ProposalNotFoundError(DomainException):
    """Saved proposal does not exist or belongs to another user"""

    def __init__(self, proposal_id: Optional[str] = None):
        self.proposal_id = proposal_id
        super().__init__(f"Proposal not found: {proposal_id}")


class AuthenticationError(DomainException):
    """Credentials were rejected or the account is inactive"""

    pass


class LogoFetchError(DomainException):
    """Remote company logo could not be fetched"""

    pass


class DocumentRenderError(DomainException):
    """Document model could not be rendered to HTML"""

    pass
