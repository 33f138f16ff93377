"""Textos das notificações ao motorista (pt-BR)."""


def registration(name: str) -> tuple[str, str]:
    return (
        "Cadastro recebido",
        f"Olá, {name}!\n\n"
        "Seu cadastro foi realizado com sucesso. Envie a CNH, o CRLV e uma "
        "selfie segurando a CNH para iniciarmos a análise.",
    )


def documents_received(name: str) -> tuple[str, str]:
    return (
        "Documentos recebidos",
        f"Olá, {name}!\n\n"
        "Recebemos todos os seus documentos. Eles estão em análise e você "
        "será avisado assim que houver uma decisão.",
    )


def approval(name: str) -> tuple[str, str]:
    return (
        "Cadastro aprovado",
        f"Parabéns, {name}!\n\nSeu cadastro foi aprovado. Você já pode começar a dirigir.",
    )


def rejection(name: str, reason: str) -> tuple[str, str]:
    return (
        "Cadastro não aprovado",
        f"Olá, {name}.\n\n"
        f"Seus documentos não foram aprovados pelo seguinte motivo:\n{reason}\n\n"
        "Você pode reenviar os documentos pelo aplicativo.",
    )
