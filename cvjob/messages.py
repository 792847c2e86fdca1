"""User-facing (Danish) notification texts."""
from __future__ import annotations

from cvjob.errors import ErrorKind, ErrorPhase

# key -> (title, description, variant)
TOAST_MESSAGES: dict[str, tuple[str, str, str]] = {
    "letterGenerated": (
        "Ansøgning genereret",
        "Din ansøgning er blevet genereret. Du kan nu redigere og gemme den.",
        "success",
    ),
    "letterUpdated": (
        "Ansøgning opdateret",
        "Din ansøgning er blevet opdateret og gemt.",
        "success",
    ),
    "letterSaved": (
        "Ansøgning gemt",
        "Din ansøgning er allerede automatisk gemt.",
        "default",
    ),
    "draftSaved": (
        "Job gemt som kladde",
        "Dit job er blevet gemt som kladde til senere brug.",
        "success",
    ),
    "missingFields": (
        "Manglende felter",
        "Udfyld venligst alle påkrævede felter.",
        "destructive",
    ),
    "generationInProgress": (
        "Generering i gang",
        "En ansøgning er allerede ved at blive genereret. Vent venligst et øjeblik.",
        "default",
    ),
    "loginRequired": (
        "Login påkrævet",
        "Du skal være logget ind for at udføre denne handling.",
        "destructive",
    ),
    "incompleteProfile": (
        "Ufuldstændig profil",
        "For at få bedre resultater, opdater venligst din profil med mere information.",
        "default",
    ),
    "generationTimeout": (
        "Generering tog for lang tid",
        "Generering af ansøgningen tog for lang tid. Prøv igen senere.",
        "destructive",
    ),
    "generationCancelled": (
        "Generering annulleret",
        "Genereringen blev afbrudt. Du kan starte igen når du er klar.",
        "default",
    ),
    "networkError": (
        "Netværksfejl",
        "Kunne ikke forbinde til serveren. Tjek din internetforbindelse og prøv igen.",
        "destructive",
    ),
    "jobNotFound": (
        "Job ikke fundet",
        "Det angivne job blev ikke fundet. Prøv igen eller opret et nyt job.",
        "destructive",
    ),
    "letterNotFound": (
        "Ansøgning ikke fundet",
        "Den angivne ansøgning blev ikke fundet. Prøv igen eller opret en ny ansøgning.",
        "destructive",
    ),
    "accessDenied": (
        "Adgang nægtet",
        "Du har ikke adgang til denne ansøgning.",
        "destructive",
    ),
    "noLetterToEdit": (
        "Fejl",
        "Ingen ansøgning at redigere.",
        "destructive",
    ),
}

# phase -> (title, help text, retry label)
PHASE_HELP: dict[ErrorPhase, tuple[str, str, str]] = {
    ErrorPhase.USER_FETCH: (
        "Fejl ved hentning af profil",
        "Kunne ikke hente brugerdata. Prøv at logge ind igen.",
        "Log ind igen",
    ),
    ErrorPhase.JOB_SAVE: (
        "Fejl ved gemning af job",
        "Kunne ikke gemme jobdata. Tjek felterne og prøv igen.",
        "Gem igen",
    ),
    ErrorPhase.JOB_FETCH: (
        "Fejl ved hentning af job",
        "Kunne ikke hente jobopslaget. Prøv igen om lidt.",
        "Hent igen",
    ),
    ErrorPhase.GENERATION: (
        "Fejl ved generering",
        "Kunne ikke generere ansøgning. Dit job er gemt, så du kan prøve igen.",
        "Generer igen",
    ),
    ErrorPhase.LETTER_SAVE: (
        "Fejl ved gemning",
        "Ansøgningen blev genereret men kunne ikke gemmes. Prøv igen.",
        "Gem ansøgning",
    ),
    ErrorPhase.LETTER_FETCH: (
        "Fejl ved hentning af ansøgning",
        "Kunne ikke hente ansøgningen. Prøv igen om lidt.",
        "Hent igen",
    ),
    ErrorPhase.CV_PARSING: (
        "Fejl ved CV-analyse",
        "Vi kunne ikke læse dit CV. Prøv en anden fil eller udfyld felterne manuelt.",
        "Upload igen",
    ),
}

KIND_TITLES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK: "Netværksfejl",
    ErrorKind.TIMEOUT: "Timeout fejl",
    ErrorKind.VALIDATION: "Fejl i formular",
    ErrorKind.AUTH: "Godkendelsesfejl",
    ErrorKind.SERVER: "Ukendt fejl",
}

DEFAULT_ERROR_DESCRIPTION = "Der opstod en fejl. Prøv venligst igen."
DEFAULT_RETRY_LABEL = "Prøv igen"

# Progress messages shown while the workflow runs.
PROGRESS_MESSAGES: dict[str, str] = {
    "job-save": "Gemmer jobopslag...",
    "user-fetch": "Henter din profil...",
    "generation": "Genererer ansøgning...",
    "letter-save": "Gemmer ansøgning...",
    "job-fetch": "Henter jobdetaljer...",
    "letter-fetch": "Henter ansøgning...",
    "complete": "Færdig!",
}
