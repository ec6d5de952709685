"""Display strings for English and French."""

import locale
import os
from typing import Dict, Literal, Optional

Language = Literal["en", "fr"]

SUPPORTED_LANGUAGES: tuple[Language, ...] = ("en", "fr")
LANGUAGE_NAMES: Dict[Language, str] = {"en": "English", "fr": "Français"}

TRANSLATIONS: Dict[Language, Dict[str, str]] = {
    "en": {
        "app_title": "Daily Word Ministry at Full Gospel Tsinga",
        "tagline": "Spreading the Gospel with Clarity and Power",
        "language_label": "Language",
        "hero_verse": '"How beautiful are the feet of those who bring good news!" - Romans 10:15',
        "form_title": "Share Your Daily Word",
        "form_description": (
            "As servants of the Most High, let us be concise yet powerful in our message. "
            "Scripture teaches us that brevity coupled with truth carries the anointing. "
            "Keep your message under 250 words so it may be easily received and shared "
            "among the brethren."
        ),
        "preacher_name_label": "Your Name (Optional)",
        "preacher_name_placeholder": "Enter your name",
        "message_label": "Your Message",
        "message_placeholder": "Write your inspired message here... Let the Holy Spirit guide your words.",
        "word_count": "words",
        "word_limit_warning": "Please reduce your message to 250 words or less to maintain clarity",
        "send_button": "Share via WhatsApp",
        "success_message": "May the Lord bless this message...",
        "feature1_title": "The Power of Brevity",
        "feature1_description": (
            "Jesus often taught in parables - short, powerful stories that transformed hearts. "
            "Concise messages penetrate deeper into the spirit."
        ),
        "feature2_title": "Swift Ministry",
        "feature2_description": (
            'With one click, share the Word with your congregation. "Go quickly and tell" - Matthew 28:7'
        ),
        "feature3_title": "Reach All Nations",
        "feature3_description": (
            "Ministry in both English and French, fulfilling the Great Commission across "
            "language barriers."
        ),
        "footer_verse": '"Let your speech always be gracious, seasoned with salt" - Colossians 4:6',
        "footer_note": "Daily Word Ministry - Empowering God's servants to share the Gospel at Tsinga",
        "draft_restored": "Your unsent message was restored",
        "save_status_idle": "",
        "save_status_saving": "Saving draft...",
        "save_status_saved": "Draft saved",
        "save_status_error": "Draft could not be saved",
        "autosave_disabled": "Autosave unavailable - your draft will not be kept",
        "share_failed": "Could not open WhatsApp. Copy this link instead:",
    },
    "fr": {
        "app_title": "Ministère de la Parole Quotidienne a Full Gospel Tsinga",
        "tagline": "Répandre l'Évangile avec Clarté et Puissance",
        "language_label": "Langue",
        "hero_verse": (
            '"Qu\'ils sont beaux les pieds de ceux qui annoncent de bonnes nouvelles!" - Romains 10:15'
        ),
        "form_title": "Partagez Votre Parole Quotidienne",
        "form_description": (
            "En tant que serviteurs du Très-Haut, soyons concis mais puissants dans notre message. "
            "L'Écriture nous enseigne que la brièveté couplée à la vérité porte l'onction. "
            "Gardez votre message sous 250 mots pour qu'il soit facilement reçu et partagé "
            "parmi les frères."
        ),
        "preacher_name_label": "Votre Nom (Optionnel)",
        "preacher_name_placeholder": "Entrez votre nom",
        "message_label": "Votre Message",
        "message_placeholder": (
            "Écrivez votre message inspiré ici... Laissez le Saint-Esprit guider vos paroles."
        ),
        "word_count": "mots",
        "word_limit_warning": "Veuillez réduire votre message à 250 mots ou moins pour maintenir la clarté",
        "send_button": "Partager via WhatsApp",
        "success_message": "Que le Seigneur bénisse ce message...",
        "feature1_title": "La Puissance de la Brièveté",
        "feature1_description": (
            "Jésus enseignait souvent en paraboles - des histoires courtes et puissantes qui "
            "transformaient les cœurs. Les messages concis pénètrent plus profondément dans l'esprit."
        ),
        "feature2_title": "Ministère Rapide",
        "feature2_description": (
            'En un clic, partagez la Parole avec votre congrégation. "Allez vite et dites" - Matthieu 28:7'
        ),
        "feature3_title": "Atteindre Toutes les Nations",
        "feature3_description": (
            "Ministère en anglais et en français, accomplissant la Grande Commission au-delà "
            "des barrières linguistiques."
        ),
        "footer_verse": (
            '"Que votre parole soit toujours accompagnée de grâce, assaisonnée de sel" - Colossiens 4:6'
        ),
        "footer_note": (
            "Ministère de la Parole Quotidienne - Équiper les serviteurs de Dieu pour partager "
            "l'Évangile à Tsinga"
        ),
        "draft_restored": "Votre message non envoyé a été restauré",
        "save_status_idle": "",
        "save_status_saving": "Enregistrement du brouillon...",
        "save_status_saved": "Brouillon enregistré",
        "save_status_error": "Le brouillon n'a pas pu être enregistré",
        "autosave_disabled": "Sauvegarde automatique indisponible - votre brouillon ne sera pas conservé",
        "share_failed": "Impossible d'ouvrir WhatsApp. Copiez plutôt ce lien :",
    },
}


def _environment_locale() -> str:
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value:
            return value

    try:
        return locale.getlocale()[0] or ""
    except ValueError:
        return ""


def detect_language(locale_name: Optional[str] = None) -> Language:
    """French for any ``fr`` locale (fr, fr_FR, fr-CA...), English otherwise."""

    name = _environment_locale() if locale_name is None else locale_name
    if name.lower().startswith("fr"):
        return "fr"
    return "en"


def resolve_language(setting: str) -> Language:
    """Turn a ``ui.language`` setting (``auto``, ``en``, ``fr``) into a language."""

    if setting in SUPPORTED_LANGUAGES:
        return setting  # type: ignore[return-value]
    return detect_language()


def get_translations(language: str) -> Dict[str, str]:
    return TRANSLATIONS.get(language, TRANSLATIONS["en"])  # type: ignore[call-overload]
