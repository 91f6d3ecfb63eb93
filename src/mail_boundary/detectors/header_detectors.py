from __future__ import annotations

import re

from mail_boundary.detectors.base import HeaderBlockDetector, compile_separator
from mail_boundary.detectors.types import Confidence

ENGLISH_KEYS = {
    "from": ("From",),
    "date": ("Sent", "Date"),
    "to": ("To",),
    "cc": ("Cc", "Bcc"),
    "subject": ("Subject",),
}

FRENCH_KEYS = {
    "from": ("De", "Expéditeur"),
    "date": ("Envoyé", "Envoye", "Date", "Envoyé le"),
    "to": ("À", "A", "Destinataire"),
    "cc": ("Cc", "Copie à"),
    "subject": ("Objet", "Sujet"),
}

LOCALIZED_KEYS = {
    "from": (
        "Von", "Van", "Afzender", "De", "Da", "Remetente", "Mittente", "Fra", "Från",
        "Od", "Nadawca", "Lähettäjä", "Feladó", "Kimden", "От", "Отправитель",
    ),
    "date": (
        "Gesendet", "Datum", "Verzonden", "Enviado", "Enviada", "Fecha", "Inviato", "Data",
        "Sendt", "Skickat", "Wysłano", "Odesláno", "Odoslané", "Lähetetty", "Päivämäärä",
        "Elküldve", "Dátum", "Tarih", "Gönderildi", "Отправлено", "Дата",
    ),
    "to": (
        "An", "Aan", "Para", "A", "Til", "Till", "Do", "Komu", "Vastaanottaja",
        "Címzett", "Kime", "Alıcı", "Кому",
    ),
    "cc": ("Cc", "Kopie", "Kopia", "Kopio", "Másolat", "Копия"),
    "subject": (
        "Betreff", "Onderwerp", "Asunto", "Assunto", "Oggetto", "Emne", "Ämne", "Temat",
        "Předmět", "Predmet", "Aihe", "Tárgy", "Konu", "Тема",
    ),
}


def _merge_keys(*tables: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
    merged: dict[str, tuple[str, ...]] = {}
    for table in tables:
        for field, keys in table.items():
            merged[field] = tuple(dict.fromkeys(merged.get(field, ()) + keys))
    return merged


FORWARD_SEPARATOR_PHRASES = (
    "Forwarded message",
    "Original Message",
    "Begin forwarded message",
    "Start of forwarded message",
    "Weitergeleitete Nachricht",
    "Ursprüngliche Nachricht",
    "Anfang der weitergeleiteten Nachricht",
    "Message transféré",
    "Message d'origine",
    "Début du message réexpédié",
    "Début du message transféré",
    "Mensaje reenviado",
    "Mensaje original",
    "Inicio del mensaje reenviado",
    "Messaggio inoltrato",
    "Messaggio originale",
    "Inizio messaggio inoltrato",
    "Mensagem encaminhada",
    "Mensagem original",
    "Início da mensagem reencaminhada",
    "Doorgestuurd bericht",
    "Oorspronkelijk bericht",
    "Begin doorgestuurd bericht",
    "Vidarebefordrat meddelande",
    "Ursprungligt meddelande",
    "Videresendt meddelelse",
    "Videresendt melding",
    "Oprindelig meddelelse",
    "Opprinnelig melding",
    "Wiadomość przekazana dalej",
    "Oryginalna wiadomość",
    "Początek przekazywanej wiadomości",
    "Přeposlaná zpráva",
    "Původní zpráva",
    "Začátek přeposlané zprávy",
    "Välitetty viesti",
    "Alkuperäinen viesti",
    "Továbbított üzenet",
    "Eredeti üzenet",
    "İletilen mesaj",
    "Orijinal mesaj",
    "Пересылаемое сообщение",
    "Пересланное сообщение",
    "Исходное сообщение",
)

FORWARD_SEPARATOR = compile_separator(FORWARD_SEPARATOR_PHRASES)
# Outlook on the web draws a rule of underscores above the quoted header block.
UNDERSCORE_SEPARATOR = re.compile(r"^_{5,}$")


class ForwardedMessageDetector(HeaderBlockDetector):
    name = "forwarded"
    priority = 0
    confidence = Confidence.HIGH
    field_keys = _merge_keys(ENGLISH_KEYS, FRENCH_KEYS, LOCALIZED_KEYS)
    separators = (FORWARD_SEPARATOR, UNDERSCORE_SEPARATOR)
    require_date = False


class OutlookHeaderDetector(HeaderBlockDetector):
    name = "outlook"
    priority = 10
    field_keys = ENGLISH_KEYS


class OutlookFrDetector(HeaderBlockDetector):
    name = "outlook_fr"
    priority = 10
    field_keys = FRENCH_KEYS


class LocalizedHeaderDetector(HeaderBlockDetector):
    name = "outlook_intl"
    priority = 20
    field_keys = LOCALIZED_KEYS
